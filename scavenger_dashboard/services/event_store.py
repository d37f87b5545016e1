"""
Хранилище событий: запись и выборка замеров хэшрейта и вызовов API.
Никаких вычислений - только append и чтение по временным диапазонам.
"""
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scavenger_dashboard.models.hashrate_sample import HashrateSample
from scavenger_dashboard.models.api_call_record import ApiCallRecord
from scavenger_dashboard.utils.constants import ENDPOINT_CHALLENGE, CHALLENGE_RESPONSE_KEY
from scavenger_dashboard.utils.helpers import utc_now
from scavenger_dashboard.utils.logging_config import StructuredLogger

logger = StructuredLogger("event_store")


class EventStore:
    """
    Доступ к таблицам stats и api_return через пул соединений.

    Каждый метод берёт отдельную сессию из пула и возвращает её при
    любом исходе (async with), так что подагрегаты отчёта читаются
    независимо друг от друга.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # ========== ЗАПИСЬ ==========

    async def append_sample(
            self,
            hash_rate: float,
            container_id: Optional[str] = None,
            miner_id: Optional[str] = None,
            timestamp: Optional[datetime] = None,
            description: Optional[str] = None
    ) -> HashrateSample:
        """Добавить замер хэшрейта"""
        sample = HashrateSample(
            container_id=container_id,
            miner_id=miner_id,
            hash_rate=hash_rate,
            timestamp=timestamp or utc_now(),
            description=description
        )
        async with self._session_factory() as session:
            session.add(sample)
            await session.flush()
            sample_id = sample.id
            await session.commit()

        logger.sample_ingested(container_id, miner_id, hash_rate, sample_id=sample_id)
        return sample

    async def append_api_call(
            self,
            endpoint: str,
            url: str,
            container_id: Optional[str] = None,
            miner_id: Optional[str] = None,
            wallet_addr: Optional[str] = None,
            payload: Any = None,
            api_response: Any = None,
            description: Optional[str] = None,
            timestamp: Optional[datetime] = None
    ) -> ApiCallRecord:
        """Добавить запись о вызове API"""
        record = ApiCallRecord(
            container_id=container_id,
            miner_id=miner_id,
            wallet_addr=wallet_addr,
            endpoint=endpoint,
            url=url,
            payload=payload,
            api_response=api_response,
            description=description,
            timestamp=timestamp or utc_now()
        )
        async with self._session_factory() as session:
            session.add(record)
            await session.flush()
            record_id = record.id
            await session.commit()

        logger.api_call_ingested(container_id, endpoint, record_id=record_id)
        return record

    # ========== ВЫБОРКА ==========

    async def fetch_samples(self, since: datetime) -> Sequence[Any]:
        """Замеры с timestamp >= since (container_id, hash_rate, timestamp)"""
        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    HashrateSample.container_id,
                    HashrateSample.hash_rate,
                    HashrateSample.timestamp
                ).where(HashrateSample.timestamp >= since)
            )
            rows = result.all()

        logger.debug(
            "Выбраны замеры хэшрейта",
            event="store_fetch_samples",
            since=since.isoformat(),
            rows=len(rows)
        )
        return rows

    async def fetch_api_calls(self, endpoint: str, since: datetime) -> Sequence[Any]:
        """Вызовы endpoint с timestamp >= since (id, container_id, url, timestamp)"""
        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    ApiCallRecord.id,
                    ApiCallRecord.container_id,
                    ApiCallRecord.url,
                    ApiCallRecord.timestamp
                )
                .where(ApiCallRecord.endpoint == endpoint)
                .where(ApiCallRecord.timestamp >= since)
            )
            rows = result.all()

        logger.debug(
            "Выбраны вызовы API",
            event="store_fetch_api_calls",
            endpoint=endpoint,
            since=since.isoformat(),
            rows=len(rows)
        )
        return rows

    async def fetch_challenges(self, challenge_ids: Iterable[str]) -> Sequence[Any]:
        """
        Записи /challenge, у которых api_response.challenge.challenge_id
        входит в challenge_ids. Сначала самые свежие (timestamp, затем id).

        Returns:
            Строки (id, timestamp, api_response)
        """
        ids = sorted(set(challenge_ids))
        if not ids:
            return []

        challenge_id_expr = ApiCallRecord.api_response[(CHALLENGE_RESPONSE_KEY, "challenge_id")].as_string()

        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    ApiCallRecord.id,
                    ApiCallRecord.timestamp,
                    ApiCallRecord.api_response
                )
                .where(ApiCallRecord.endpoint == ENDPOINT_CHALLENGE)
                .where(challenge_id_expr.in_(ids))
                .order_by(ApiCallRecord.timestamp.desc(), ApiCallRecord.id.desc())
            )
            rows = result.all()

        logger.debug(
            "Выбраны записи задач",
            event="store_fetch_challenges",
            requested=len(ids),
            rows=len(rows)
        )
        return rows

    # ========== ПОСЛЕДНИЕ СОБЫТИЯ ==========

    async def latest_sample_per_container(self) -> List[Any]:
        """Последний замер каждого контейнера (как представление latest_hashrate)"""
        row_number = func.row_number().over(
            partition_by=HashrateSample.container_id,
            order_by=(HashrateSample.timestamp.desc(), HashrateSample.id.desc())
        ).label("rn")
        ranked = select(
            HashrateSample.container_id,
            HashrateSample.miner_id,
            HashrateSample.hash_rate,
            HashrateSample.timestamp,
            row_number
        ).subquery()

        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    ranked.c.container_id,
                    ranked.c.miner_id,
                    ranked.c.hash_rate,
                    ranked.c.timestamp
                )
                .where(ranked.c.rn == 1)
                .order_by(ranked.c.container_id)
            )
            return list(result.all())

    async def latest_api_call_per_wallet_endpoint(self) -> List[Any]:
        """Последний вызов для каждой пары (кошелёк, endpoint), как latest_api_calls"""
        row_number = func.row_number().over(
            partition_by=(ApiCallRecord.wallet_addr, ApiCallRecord.endpoint),
            order_by=(ApiCallRecord.timestamp.desc(), ApiCallRecord.id.desc())
        ).label("rn")
        ranked = select(
            ApiCallRecord.container_id,
            ApiCallRecord.miner_id,
            ApiCallRecord.wallet_addr,
            ApiCallRecord.endpoint,
            ApiCallRecord.timestamp,
            ApiCallRecord.description,
            ApiCallRecord.api_response,
            row_number
        ).subquery()

        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    ranked.c.container_id,
                    ranked.c.miner_id,
                    ranked.c.wallet_addr,
                    ranked.c.endpoint,
                    ranked.c.timestamp,
                    ranked.c.description,
                    ranked.c.api_response
                )
                .where(ranked.c.rn == 1)
                .order_by(ranked.c.wallet_addr, ranked.c.endpoint)
            )
            return list(result.all())

    # ========== СЛУЖЕБНОЕ ==========

    async def ping(self) -> datetime:
        """Проверка соединения: время сервера БД"""
        async with self._session_factory() as session:
            result = await session.execute(select(func.now()))
            return result.scalar()
