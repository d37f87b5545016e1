from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from scavenger_dashboard.dependencies import get_report_composer, get_event_store
from scavenger_dashboard.schemas.models import WorkerReport, LatestHashrate, LatestApiCall
from scavenger_dashboard.services.event_store import EventStore
from scavenger_dashboard.services.report_composer import ReportComposer
from scavenger_dashboard.utils.logging_config import StructuredLogger

logger = StructuredLogger(__name__)

router = APIRouter(tags=["report"])

INTERNAL_ERROR = "Internal server error"


@router.get(
    "/report",
    response_model=List[WorkerReport],
    summary="Отчёт по воркерам",
    response_description="Одна строка на контейнер, активный в коротком окне"
)  # Будет /api/v1/report
async def get_report(composer: ReportComposer = Depends(get_report_composer)):
    """
    Текущий вклад, активность и задача каждого контейнера.

    - **window_minutes**: Длина короткого окна (опционально, по умолчанию 10)

    Строки отсортированы по среднему хэшрейту за окно, по убыванию.
    """
    try:
        return await composer.get_report()
    except Exception as e:
        logger.error(
            "Ошибка построения отчёта",
            exc_info=True,
            event="report_error",
            window_seconds=composer.window_seconds,
            error=str(e),
            error_type=type(e).__name__
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR
        )


@router.get(
    "/latest/hashrate",
    response_model=List[LatestHashrate],
    summary="Последний замер каждого контейнера"
)
async def latest_hashrate(store: EventStore = Depends(get_event_store)):
    try:
        return await store.latest_sample_per_container()
    except Exception as e:
        logger.error(
            "Ошибка чтения последних замеров",
            exc_info=True,
            event="latest_hashrate_error",
            error=str(e),
            error_type=type(e).__name__
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR
        )


@router.get(
    "/latest/api-calls",
    response_model=List[LatestApiCall],
    summary="Последний вызов API по каждой паре (кошелёк, endpoint)"
)
async def latest_api_calls(store: EventStore = Depends(get_event_store)):
    try:
        return await store.latest_api_call_per_wallet_endpoint()
    except Exception as e:
        logger.error(
            "Ошибка чтения последних вызовов API",
            exc_info=True,
            event="latest_api_calls_error",
            error=str(e),
            error_type=type(e).__name__
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR
        )
