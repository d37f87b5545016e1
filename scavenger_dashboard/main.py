from datetime import datetime, UTC
from typing import List

import uvicorn
from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scavenger_dashboard.api.v1.report import router as report_router, get_report
from scavenger_dashboard.api.v1.ingest import router as ingest_router
from scavenger_dashboard.dependencies import get_event_store
from scavenger_dashboard.lifespan import lifespan
from scavenger_dashboard.schemas.models import WorkerReport, HealthCheckResponse
from scavenger_dashboard.services.event_store import EventStore
from scavenger_dashboard.utils.config import settings
from scavenger_dashboard.utils.constants import SERVICE_NAME, SERVICE_VERSION, API_VERSION
from scavenger_dashboard.utils.logging_config import StructuredLogger

logger = StructuredLogger(__name__)

app = FastAPI(
    title="Scavenger Fleet Dashboard API",
    version=SERVICE_VERSION,
    description="Hash-rate and solution activity report for a mining fleet",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем роутеры v1 с префиксом /api/v1
app.include_router(report_router, prefix="/api/v1")
app.include_router(ingest_router, prefix="/api/v1")

# Тот же отчёт по короткому пути /api/stats (поля как в /api/v1/report)
app.add_api_route(
    "/api/stats",
    get_report,
    methods=["GET"],
    response_model=List[WorkerReport],
    tags=["report"],
    summary="Отчёт по воркерам (короткий путь)"
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """422 без эхо входных значений: inf и NaN не сериализуются в JSON"""
    errors = [
        {key: value for key, value in error.items() if key != "input"}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(errors)}
    )


@app.get("/")
async def root():
    """Корневой эндпоинт с информацией о сервисе"""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "api_version": API_VERSION,
        "endpoints": {
            "v1_docs": "/docs",
            "v1_openapi": "/api/v1/openapi.json",
            "report": "/api/v1/report",
            "report_alias": "/api/stats",
            "insert_stat": "/api/v1/insert_stat",
            "insert_api_return": "/api/v1/insert_api_return"
        }
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health():
    """Базовая проверка здоровья сервиса"""
    return HealthCheckResponse(
        service="scavenger-dashboard",
        status="healthy",
        version=SERVICE_VERSION,
        timestamp=datetime.now(UTC)
    )


@app.get("/database/health")
async def database_health(store: EventStore = Depends(get_event_store)):
    """Проверка подключения к базе данных"""
    try:
        db_time = await store.ping()
        return {
            "status": "connected",
            "database": {
                "server_time": str(db_time),
                "pool_size": settings.db_pool_size
            }
        }
    except Exception as e:
        logger.warning(
            "База данных недоступна",
            event="database_health_failed",
            error_type=type(e).__name__
        )
        return {
            "status": "error",
            "database": {
                "connected": False
            }
        }


def run():
    """Запуск HTTP сервера отчёта"""
    uvicorn.run(
        "scavenger_dashboard.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info"
    )


if __name__ == "__main__":
    run()
