from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

from scavenger_dashboard.utils.config import settings, Settings


# ========== 1. BASE ДЛЯ МОДЕЛЕЙ ==========
class Base(DeclarativeBase):
    """Единый Base для всех моделей"""
    pass


# JSONB на PostgreSQL, обычный JSON на остальных диалектах (SQLite в тестах)
StructuredJSON = JSON().with_variant(JSONB(), "postgresql")


# ========== 2. ASYNC ДВИЖОК С ОГРАНИЧЕННЫМ ПУЛОМ ==========
def create_engine_from_settings(config: Settings) -> AsyncEngine:
    """Создание async движка с ограниченным пулом соединений"""
    connect_args = {"ssl": True} if config.db_ssl else {}
    return create_async_engine(
        config.database_url,
        echo=config.db_echo,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_timeout=config.db_pool_timeout,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


async_engine = create_engine_from_settings(settings)
AsyncSessionLocal = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


# ========== 3. DEPENDENCY ДЛЯ FASTAPI ==========
async def get_db():
    """Получение async сессии для FastAPI эндпоинтов"""
    async with AsyncSessionLocal() as session:
        yield session


def get_async_engine() -> AsyncEngine:
    """Получение async движка (для приложения)"""
    return async_engine
