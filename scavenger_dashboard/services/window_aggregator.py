"""
Агрегатор окон: статистика хэшрейта по контейнерам и по всему флоту
за короткое окно (по умолчанию 10 минут) и за текущие сутки UTC.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Optional

from scavenger_dashboard.utils.constants import DEFAULT_SHORT_WINDOW
from scavenger_dashboard.utils.helpers import start_of_day_utc, to_naive_utc
from scavenger_dashboard.utils.logging_config import StructuredLogger

logger = StructuredLogger(__name__)


@dataclass(frozen=True)
class ShortWindowStats:
    """Статистика контейнера за короткое окно"""
    container_id: Optional[str]
    sample_count: int
    avg_hashrate: float
    last_timestamp: datetime


@dataclass(frozen=True)
class DailyStats:
    """Статистика контейнера с начала суток UTC"""
    container_id: Optional[str]
    sample_count: int
    avg_hashrate: float
    sum_hashrate: float


@dataclass(frozen=True)
class GlobalStats:
    """Статистика всего флота за короткое окно"""
    total_hashrate: float = 0.0
    avg_hashrate: float = 0.0
    max_hashrate: float = 0.0
    sample_count: int = 0


@dataclass
class WindowAggregates:
    """Результат агрегации для одного запроса"""
    short: Dict[Optional[str], ShortWindowStats] = field(default_factory=dict)
    daily: Dict[Optional[str], DailyStats] = field(default_factory=dict)
    global_stats: GlobalStats = field(default_factory=GlobalStats)


# ========== ЧИСТЫЕ ФУНКЦИИ АГРЕГАЦИИ ==========

def summarize_short_window(samples: Iterable[Any]) -> Dict[Optional[str], ShortWindowStats]:
    """Среднее, количество и последний timestamp по контейнерам"""
    totals: Dict[Optional[str], list] = {}
    for sample in samples:
        bucket = totals.setdefault(sample.container_id, [0, 0.0, sample.timestamp])
        bucket[0] += 1
        bucket[1] += sample.hash_rate
        if sample.timestamp > bucket[2]:
            bucket[2] = sample.timestamp

    return {
        container_id: ShortWindowStats(
            container_id=container_id,
            sample_count=count,
            avg_hashrate=total / count,
            last_timestamp=last
        )
        for container_id, (count, total, last) in totals.items()
    }


def summarize_daily(samples: Iterable[Any]) -> Dict[Optional[str], DailyStats]:
    """Среднее, сумма и количество по контейнерам"""
    totals: Dict[Optional[str], list] = {}
    for sample in samples:
        bucket = totals.setdefault(sample.container_id, [0, 0.0])
        bucket[0] += 1
        bucket[1] += sample.hash_rate

    return {
        container_id: DailyStats(
            container_id=container_id,
            sample_count=count,
            avg_hashrate=total / count,
            sum_hashrate=total
        )
        for container_id, (count, total) in totals.items()
    }


def summarize_global(
        samples: Iterable[Any],
        per_container: Dict[Optional[str], ShortWindowStats]
) -> GlobalStats:
    """
    Статистика флота за короткое окно.

    Общий хэшрейт флота - сумма средних по контейнерам. Среднее, максимум
    и количество считаются по сырым замерам.
    """
    count = 0
    total = 0.0
    peak = 0.0
    for sample in samples:
        count += 1
        total += sample.hash_rate
        if count == 1 or sample.hash_rate > peak:
            peak = sample.hash_rate

    if count == 0:
        return GlobalStats()

    return GlobalStats(
        total_hashrate=sum(stats.avg_hashrate for stats in per_container.values()),
        avg_hashrate=total / count,
        max_hashrate=peak,
        sample_count=count
    )


# ========== АГРЕГАТОР ==========

class WindowAggregator:
    """Считает оконные агрегаты по свежему состоянию хранилища"""

    def __init__(self, store, window: timedelta = DEFAULT_SHORT_WINDOW):
        if window <= timedelta(0):
            raise ValueError(f"Окно должно быть положительным: {window}")
        self.store = store
        self.window = window

    async def aggregate(self, now: datetime) -> WindowAggregates:
        """
        Агрегаты короткого окна, суток и флота на момент now

        Args:
            now: Момент расчёта (UTC)

        Returns:
            WindowAggregates; контейнеры без замеров в коротком окне отсутствуют
        """
        now = to_naive_utc(now)
        short_since = now - self.window
        day_since = start_of_day_utc(now)

        # Подагрегаты читаются независимо, без общей транзакции
        short_samples = list(await self.store.fetch_samples(short_since))
        daily_samples = await self.store.fetch_samples(day_since)

        short = summarize_short_window(short_samples)
        daily = summarize_daily(daily_samples)
        global_stats = summarize_global(short_samples, short)

        logger.debug(
            "Оконные агрегаты посчитаны",
            event="window_aggregated",
            short_containers=len(short),
            daily_containers=len(daily),
            global_samples=global_stats.sample_count
        )
        return WindowAggregates(short=short, daily=daily, global_stats=global_stats)
