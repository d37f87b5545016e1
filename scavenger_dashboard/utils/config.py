from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    # База данных событий
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "stats"
    db_user: str = "stats"
    db_password: str
    db_ssl: bool = False

    # Пул соединений (ограниченный)
    db_pool_size: int = 5
    db_max_overflow: int = 0
    db_pool_timeout: float = 30.0  # секунды ожидания свободного соединения
    db_echo: bool = False

    # Окна агрегации
    short_window_minutes: int = 10

    # HTTP сервер отчёта
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Схема БД создаётся при старте
    create_schema_on_startup: bool = True

    # Логирование
    log_dir: str = "logs"
    log_to_file: bool = True

    # Разработка
    debug: bool = False

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """URL для async движка SQLAlchemy"""
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def short_window_seconds(self) -> int:
        return self.short_window_minutes * 60


settings = Settings()
