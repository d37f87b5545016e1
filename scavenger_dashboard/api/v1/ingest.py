from fastapi import APIRouter, Depends, HTTPException, status

from scavenger_dashboard.dependencies import get_event_store
from scavenger_dashboard.schemas.models import HashrateSampleCreate, ApiCallRecordCreate, IngestResponse
from scavenger_dashboard.services.event_store import EventStore
from scavenger_dashboard.utils.logging_config import StructuredLogger

logger = StructuredLogger(__name__)

router = APIRouter(tags=["ingest"])


@router.post(
    "/insert_stat",
    response_model=IngestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Запись замера хэшрейта"
)  # Будет /api/v1/insert_stat
async def insert_stat(
        body: HashrateSampleCreate,
        store: EventStore = Depends(get_event_store)
):
    """
    Добавление замера хэшрейта от воркера.

    - **hash_rate**: Хэшрейт, H/s (обязательно, >= 0)
    - **timestamp**: Время замера (опционально, иначе время сервера)
    """
    try:
        sample = await store.append_sample(
            hash_rate=body.hash_rate,
            container_id=body.container_id,
            miner_id=body.miner_id,
            timestamp=body.timestamp,
            description=body.description
        )
    except Exception as e:
        logger.error(
            "Ошибка записи замера",
            exc_info=True,
            event="insert_stat_error",
            container_id=body.container_id,
            error=str(e),
            error_type=type(e).__name__
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )
    return IngestResponse(id=sample.id)


@router.post(
    "/insert_api_return",
    response_model=IngestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Запись вызова API"
)  # Будет /api/v1/insert_api_return
async def insert_api_return(
        body: ApiCallRecordCreate,
        store: EventStore = Depends(get_event_store)
):
    """
    Добавление записи о вызове вышестоящего API. Время назначается сервером.
    """
    try:
        record = await store.append_api_call(
            endpoint=body.endpoint,
            url=body.url,
            container_id=body.container_id,
            miner_id=body.miner_id,
            wallet_addr=body.wallet_addr,
            payload=body.payload,
            api_response=body.api_response,
            description=body.description
        )
    except Exception as e:
        logger.error(
            "Ошибка записи вызова API",
            exc_info=True,
            event="insert_api_return_error",
            container_id=body.container_id,
            endpoint=body.endpoint,
            error=str(e),
            error_type=type(e).__name__
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )
    return IngestResponse(id=record.id)
