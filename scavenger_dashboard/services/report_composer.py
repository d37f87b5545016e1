"""
Сборщик отчёта: одна строка на контейнер, активный в коротком окне
"""
import time
from datetime import datetime, timedelta
from typing import List, Optional

from scavenger_dashboard.schemas.models import WorkerReport
from scavenger_dashboard.services.window_aggregator import (
    WindowAggregator,
    WindowAggregates,
    ShortWindowStats,
)
from scavenger_dashboard.services.correlation_resolver import (
    CorrelationResolver,
    SolutionActivity,
)
from scavenger_dashboard.utils.constants import DEFAULT_SHORT_WINDOW, SHARE_PCT_DIGITS
from scavenger_dashboard.utils.helpers import round_half_up, utc_now
from scavenger_dashboard.utils.logging_config import StructuredLogger

logger = StructuredLogger(__name__)


def global_share_pct(avg_hashrate: float, global_total: float) -> Optional[float]:
    """Доля контейнера в хэшрейте флота, %; None при нулевом итоге"""
    if not global_total:
        return None
    return round_half_up(avg_hashrate / global_total * 100, SHARE_PCT_DIGITS)


def estimated_hashes(avg_hashrate: float, window_seconds: float) -> int:
    """Оценка числа хэшей за окно: среднее считается постоянным на всём окне"""
    return round_half_up(avg_hashrate * window_seconds)


def build_row(
        short: ShortWindowStats,
        aggregates: WindowAggregates,
        activity: Optional[SolutionActivity],
        window_seconds: float
) -> WorkerReport:
    """Строка отчёта из агрегатов и корреляции"""
    daily = aggregates.daily.get(short.container_id)
    global_stats = aggregates.global_stats
    challenge = activity.challenge if activity else None

    return WorkerReport(
        container_id=short.container_id,
        avg_hashrate_short=short.avg_hashrate,
        daily_avg_hashrate=daily.avg_hashrate if daily else None,
        daily_sum_hashrate=daily.sum_hashrate if daily else None,
        daily_sample_count=daily.sample_count if daily else None,
        solutions_submitted_short=activity.solutions_short if activity else 0,
        solutions_submitted_daily=activity.solutions_daily if activity else 0,
        global_total_short=global_stats.total_hashrate,
        global_avg_short=global_stats.avg_hashrate,
        global_max_short=global_stats.max_hashrate,
        global_sample_count=global_stats.sample_count,
        global_share_pct=global_share_pct(short.avg_hashrate, global_stats.total_hashrate),
        estimated_hashes_short=estimated_hashes(short.avg_hashrate, window_seconds),
        challenge_id=activity.challenge_id if activity else None,
        difficulty=challenge.difficulty if challenge else None,
        challenge_day=challenge.day if challenge else None,
        issued_at=challenge.issued_at if challenge else None
    )


class ReportComposer:
    """
    Строит отчёт по воркерам заново на каждый вызов.

    Без кэша и без состояния между вызовами: безопасно вызывать
    параллельно и повторно.
    """

    def __init__(
            self,
            store,
            window: timedelta = DEFAULT_SHORT_WINDOW,
            aggregator: Optional[WindowAggregator] = None,
            resolver: Optional[CorrelationResolver] = None
    ):
        self.window = window
        self.aggregator = aggregator or WindowAggregator(store, window)
        self.resolver = resolver or CorrelationResolver(store, window)

    @property
    def window_seconds(self) -> int:
        return int(self.window.total_seconds())

    async def get_report(self, now: Optional[datetime] = None) -> List[WorkerReport]:
        """
        Отчёт по контейнерам на момент now

        Args:
            now: Момент расчёта (UTC), по умолчанию текущий

        Returns:
            Строки, отсортированные по среднему хэшрейту (по убыванию)
        """
        started = time.perf_counter()
        now = now or utc_now()

        aggregates = await self.aggregator.aggregate(now)
        activity = await self.resolver.resolve(now)

        rows = [
            build_row(short, aggregates, activity.get(container_id), self.window_seconds)
            for container_id, short in aggregates.short.items()
        ]
        rows.sort(key=lambda row: (-row.avg_hashrate_short, row.container_id or ""))

        logger.report_built(
            rows=len(rows),
            window_seconds=self.window_seconds,
            duration_ms=round((time.perf_counter() - started) * 1000, 2)
        )
        return rows
