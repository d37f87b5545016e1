"""
Конфигурация для тестов
"""
import os
import sys
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional

import pytest

# Добавляем корень проекта в sys.path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Настройки читаются при импорте, пароль БД обязателен
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("LOG_TO_FILE", "false")

from scavenger_dashboard.models.hashrate_sample import HashrateSample  # noqa: E402
from scavenger_dashboard.models.api_call_record import ApiCallRecord  # noqa: E402
from scavenger_dashboard.utils.constants import ENDPOINT_CHALLENGE  # noqa: E402

# Фиксированный момент расчёта: полдень, чтобы окно не пересекало полночь
NOW = datetime(2026, 10, 18, 12, 0, 0)


class FakeEventStore:
    """In-memory хранилище с тем же интерфейсом чтения, что у EventStore"""

    def __init__(self):
        self.samples: List[HashrateSample] = []
        self.api_calls: List[ApiCallRecord] = []
        self.fail_with: Optional[Exception] = None
        self.calls = 0

    def _check(self):
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with

    def add_sample(self, container_id, hash_rate, timestamp, miner_id="m0"):
        sample = HashrateSample(
            id=len(self.samples) + 1,
            container_id=container_id,
            miner_id=miner_id,
            hash_rate=hash_rate,
            timestamp=timestamp
        )
        self.samples.append(sample)
        return sample

    def add_api_call(self, container_id, endpoint, url, timestamp, api_response=None, wallet_addr="addr"):
        record = ApiCallRecord(
            id=len(self.api_calls) + 1,
            container_id=container_id,
            miner_id="m0",
            wallet_addr=wallet_addr,
            endpoint=endpoint,
            url=url,
            timestamp=timestamp,
            api_response=api_response
        )
        self.api_calls.append(record)
        return record

    async def fetch_samples(self, since: datetime) -> List[Any]:
        self._check()
        return [s for s in self.samples if s.timestamp >= since]

    async def fetch_api_calls(self, endpoint: str, since: datetime) -> List[Any]:
        self._check()
        return [c for c in self.api_calls if c.endpoint == endpoint and c.timestamp >= since]

    async def fetch_challenges(self, challenge_ids: Iterable[str]) -> List[Any]:
        self._check()
        wanted = set(challenge_ids)
        matches = []
        for call in self.api_calls:
            if call.endpoint != ENDPOINT_CHALLENGE:
                continue
            challenge = call.api_response.get("challenge") if isinstance(call.api_response, dict) else None
            challenge_id = challenge.get("challenge_id") if isinstance(challenge, dict) else None
            if challenge_id is not None and str(challenge_id) in wanted:
                matches.append(call)
        return sorted(matches, key=lambda c: (c.timestamp, c.id), reverse=True)


def solution_url(wallet: str, challenge_id: str, nonce: str = "00ff") -> str:
    """URL отправки решения, как его строит майнер"""
    return f"https://scavenger.example/api/solution/{wallet}/{challenge_id}/{nonce}"


def challenge_response(challenge_id: str, difficulty="000FFFFF", day=3,
                       issued_at="2026-10-18T11:00:00Z") -> dict:
    """Ответ /challenge с метаданными задачи"""
    return {
        "code": "active",
        "challenge": {
            "challenge_id": challenge_id,
            "difficulty": difficulty,
            "day": day,
            "challenge_number": 7,
            "issued_at": issued_at
        }
    }


@pytest.fixture
def now():
    """Момент расчёта отчёта"""
    return NOW


@pytest.fixture
def store():
    """Пустое in-memory хранилище"""
    return FakeEventStore()


@pytest.fixture
def minutes_ago(now):
    """Фабрика моментов относительно NOW"""
    def _ago(minutes: float) -> datetime:
        return now - timedelta(minutes=minutes)
    return _ago
