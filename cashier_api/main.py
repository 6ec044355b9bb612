"""Главный файл приложения. Точка входа."""

import logging
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cashier_api.core.config import Settings, settings
from cashier_api.core.exceptions import CashierError
from cashier_api.db.session import create_engine, create_session_factory, ping
from cashier_api.handlers import products
from cashier_api.services.product_service import ProductGateway


def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Собирает приложение FastAPI.

    Args:
        app_settings: Настройки приложения.

    Returns:
        Готовое приложение с маршрутами и обработчиками ошибок.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Контекстный менеджер для управления жизненным циклом приложения.
        """
        logging.basicConfig(
            level=app_settings.LOG_LEVEL,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        engine = create_engine(app_settings)
        try:
            await ping(engine)
        except Exception:
            await engine.dispose()
            logging.exception("Cannot connect to database")
            raise
        logging.info(
            "Connected to database %s at %s:%s",
            app_settings.POSTGRES_DB,
            app_settings.POSTGRES_HOST,
            app_settings.POSTGRES_PORT,
        )

        # Шлюз хранится в app.state и передается в хендлеры через Depends
        app.state.product_gateway = ProductGateway(create_session_factory(engine))

        yield

        logging.info("Shutting down, closing database pool")
        await engine.dispose()

    app = FastAPI(title="Cashier API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        logging.info(
            "%s %s %s %d %.1fms",
            request.client.host if request.client else "-",
            request.method,
            path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response

    @app.exception_handler(CashierError)
    async def cashier_error_handler(request: Request, exc: CashierError) -> Response:
        return JSONResponse(content={"error": exc.message}, status_code=exc.status_code)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Проверка, что процесс жив."""
        return {"status": "ok", "message": "Cashier API is running"}

    app.include_router(products.router)
    return app


# --- Приложение FastAPI ---
app = create_app()


# --- Точка входа для локального запуска ---
if __name__ == "__main__":
    uvicorn.run(
        "cashier_api.main:app",
        host="0.0.0.0",  # noqa: B104
        port=settings.PORT,
    )
