"""Настройки конфигурации приложения."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Загружает настройки из переменных окружения и файла .env.

    Атрибуты:
        model_config: Конфигурация для Pydantic моделей.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # База данных
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "123"
    POSTGRES_DB: str = "cashier_db"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5433
    POSTGRES_SSL_MODE: str = "disable"

    # Пул соединений: максимум открытых = DB_POOL_SIZE + DB_MAX_OVERFLOW
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 20
    # Время жизни соединения в секундах
    DB_POOL_RECYCLE: int = 300

    # HTTP
    PORT: int = 8080
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        """
        Собирает строку подключения к PostgreSQL.

        Returns:
            Строка подключения для SQLAlchemy.
        """
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()
