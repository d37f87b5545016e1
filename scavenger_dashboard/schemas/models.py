"""
Pydantic схемы для валидации данных - версия для Pydantic V2
"""
from datetime import datetime
from typing import Optional, Any
from pydantic import BaseModel, Field, ConfigDict, field_validator

from scavenger_dashboard.utils.helpers import to_naive_utc


# ========== ВХОДЯЩИЕ СОБЫТИЯ ==========
class HashrateSampleCreate(BaseModel):
    """Замер хэшрейта от воркера"""
    container_id: Optional[str] = Field(default=None, max_length=255)
    miner_id: Optional[str] = Field(default=None, max_length=255)
    hash_rate: float = Field(ge=0, allow_inf_nan=False, description="Хэшрейт, H/s")
    timestamp: Optional[datetime] = Field(default=None, description="Если не задан - время сервера")
    description: Optional[str] = None

    @field_validator('timestamp')
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Храним наивный UTC"""
        return to_naive_utc(v) if v is not None else None


class ApiCallRecordCreate(BaseModel):
    """Запись о вызове вышестоящего API"""
    container_id: Optional[str] = Field(default=None, max_length=255)
    miner_id: Optional[str] = Field(default=None, max_length=255)
    wallet_addr: Optional[str] = None
    endpoint: str = Field(min_length=1, description="Например /challenge или /solution")
    url: str = Field(min_length=1, description="Полный URL запроса")
    payload: Optional[Any] = None
    api_response: Optional[Any] = None
    description: Optional[str] = None


class IngestResponse(BaseModel):
    """Ответ на запись события"""
    status: str = "ok"
    id: Optional[int] = None


# ========== ОТЧЁТ ==========
class WorkerReport(BaseModel):
    """Строка отчёта по одному контейнеру"""
    container_id: Optional[str]
    avg_hashrate_short: float
    daily_avg_hashrate: Optional[float] = None
    daily_sum_hashrate: Optional[float] = None
    daily_sample_count: Optional[int] = None
    solutions_submitted_short: int = 0
    solutions_submitted_daily: int = 0
    global_total_short: float
    global_avg_short: float
    global_max_short: float
    global_sample_count: int
    global_share_pct: Optional[float] = None
    estimated_hashes_short: int
    challenge_id: Optional[str] = None
    difficulty: Optional[str] = None
    challenge_day: Optional[int] = None
    issued_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


# ========== ПОСЛЕДНИЕ СОБЫТИЯ ==========
class LatestHashrate(BaseModel):
    """Последний замер контейнера"""
    container_id: Optional[str]
    miner_id: Optional[str]
    hash_rate: float
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class LatestApiCall(BaseModel):
    """Последний вызов API по паре (кошелёк, endpoint)"""
    container_id: Optional[str]
    miner_id: Optional[str]
    wallet_addr: Optional[str]
    endpoint: str
    timestamp: datetime
    description: Optional[str] = None
    api_response: Optional[Any] = None

    model_config = ConfigDict(from_attributes=True)


# ========== СЛУЖЕБНЫЕ ==========
class HealthCheckResponse(BaseModel):
    """Схема для проверки здоровья"""
    service: str
    status: str
    version: str
    timestamp: datetime
