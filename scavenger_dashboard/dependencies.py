"""
Файл для хранения глобальных зависимостей и предотвращения циклических импортов.
"""
from datetime import timedelta
from typing import Optional

from fastapi import Depends, Query

from scavenger_dashboard.utils.config import settings
from scavenger_dashboard.utils.constants import MIN_WINDOW_MINUTES, MAX_WINDOW_MINUTES
from scavenger_dashboard.models.database import AsyncSessionLocal
from scavenger_dashboard.services.event_store import EventStore
from scavenger_dashboard.services.report_composer import ReportComposer

# Хранилище поверх общего пула соединений процесса
event_store = EventStore(AsyncSessionLocal)


# Функции для зависимостей (для FastAPI Depends)
def get_event_store() -> EventStore:
    return event_store


def get_report_window(
        window_minutes: Optional[int] = Query(
            default=None,
            ge=MIN_WINDOW_MINUTES,
            le=MAX_WINDOW_MINUTES,
            description="Длина короткого окна в минутах (по умолчанию из настроек)"
        )
) -> timedelta:
    return timedelta(minutes=window_minutes or settings.short_window_minutes)


def get_report_composer(
        store: EventStore = Depends(get_event_store),
        window: timedelta = Depends(get_report_window)
) -> ReportComposer:
    """Новый сборщик на каждый запрос"""
    return ReportComposer(store, window=window)


__all__ = [
    "event_store",
    "get_event_store",
    "get_report_window",
    "get_report_composer"
]
