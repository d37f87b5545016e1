from contextlib import asynccontextmanager
from fastapi import FastAPI

from scavenger_dashboard.models import Base
from scavenger_dashboard.models.database import get_async_engine
from scavenger_dashboard.models.views import create_views
from scavenger_dashboard.utils.config import settings
from scavenger_dashboard.utils.logging_config import setup_logging, StructuredLogger

logger = StructuredLogger(__name__)


async def init_schema(engine) -> None:
    """Создание таблиц, индексов и представлений (идемпотентно)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        views_created = await create_views(conn)

    logger.info(
        "Схема БД готова",
        event="schema_ready",
        views_created=views_created
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan менеджер для управления событиями запуска/остановки приложения.
    """

    # ========== STARTUP ==========
    setup_logging()
    logger.info("Запуск Scavenger Fleet Dashboard...", event="startup")

    engine = get_async_engine()

    if settings.create_schema_on_startup:
        try:
            await init_schema(engine)
        except Exception as e:
            # Без БД сервис всё равно поднимается, отчёт вернёт 500
            logger.error(
                "Не удалось подготовить схему БД",
                exc_info=True,
                event="schema_error",
                error=str(e),
                error_type=type(e).__name__
            )

    yield

    # ========== SHUTDOWN ==========
    logger.info("Остановка Scavenger Fleet Dashboard...", event="shutdown")
    await engine.dispose()
    logger.info("Пул соединений закрыт", event="pool_disposed")
