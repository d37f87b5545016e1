"""
Тесты для WindowAggregator
"""
import pytest
from datetime import datetime, timedelta, timezone

from scavenger_dashboard.services.window_aggregator import (
    WindowAggregator,
    GlobalStats,
    summarize_short_window,
    summarize_daily,
    summarize_global,
)


class TestSummaries:
    """Чистые функции агрегации"""

    def test_short_window_average_and_last(self, store, minutes_ago):
        store.add_sample("A", 100.0, minutes_ago(1))
        store.add_sample("A", 200.0, minutes_ago(2))
        store.add_sample("B", 700.0, minutes_ago(1))

        result = summarize_short_window(store.samples)

        assert set(result) == {"A", "B"}
        assert result["A"].avg_hashrate == 150.0
        assert result["A"].sample_count == 2
        assert result["A"].last_timestamp == minutes_ago(1)
        assert result["B"].avg_hashrate == 700.0

    def test_daily_sum_and_count(self, store, minutes_ago):
        store.add_sample("A", 10.0, minutes_ago(300))
        store.add_sample("A", 30.0, minutes_ago(5))

        result = summarize_daily(store.samples)

        assert result["A"].sample_count == 2
        assert result["A"].sum_hashrate == 40.0
        assert result["A"].avg_hashrate == 20.0

    def test_global_total_is_sum_of_container_averages(self, store, minutes_ago):
        store.add_sample("A", 100.0, minutes_ago(1))
        store.add_sample("A", 200.0, minutes_ago(2))
        store.add_sample("B", 700.0, minutes_ago(1))

        per_container = summarize_short_window(store.samples)
        stats = summarize_global(store.samples, per_container)

        assert stats.total_hashrate == 850.0
        assert stats.max_hashrate == 700.0
        assert stats.sample_count == 3
        assert stats.avg_hashrate == pytest.approx(1000.0 / 3)

    def test_global_empty(self):
        assert summarize_global([], {}) == GlobalStats()

    def test_global_all_zero_rates(self, store, minutes_ago):
        store.add_sample("A", 0.0, minutes_ago(1))
        per_container = summarize_short_window(store.samples)

        stats = summarize_global(store.samples, per_container)

        assert stats.total_hashrate == 0.0
        assert stats.sample_count == 1


class TestWindowAggregator:
    """Агрегатор поверх хранилища"""

    @pytest.mark.asyncio
    async def test_container_outside_short_window_is_omitted(self, store, now, minutes_ago):
        store.add_sample("A", 100.0, minutes_ago(1))
        store.add_sample("STALE", 500.0, minutes_ago(30))

        result = await WindowAggregator(store).aggregate(now)

        assert set(result.short) == {"A"}
        # За сутки контейнер всё равно посчитан
        assert set(result.daily) == {"A", "STALE"}
        assert result.global_stats.total_hashrate == 100.0

    @pytest.mark.asyncio
    async def test_window_boundary_is_inclusive(self, store, now, minutes_ago):
        store.add_sample("A", 100.0, minutes_ago(10))

        result = await WindowAggregator(store).aggregate(now)

        assert "A" in result.short

    @pytest.mark.asyncio
    async def test_daily_starts_at_utc_midnight(self, store):
        now = datetime(2026, 10, 18, 0, 5, 0)
        store.add_sample("A", 100.0, datetime(2026, 10, 17, 23, 58, 0))
        store.add_sample("A", 300.0, datetime(2026, 10, 18, 0, 2, 0))

        result = await WindowAggregator(store).aggregate(now)

        # Короткое окно переходит через полночь, сутки - нет
        assert result.short["A"].sample_count == 2
        assert result.short["A"].avg_hashrate == 200.0
        assert result.daily["A"].sample_count == 1
        assert result.daily["A"].sum_hashrate == 300.0

    @pytest.mark.asyncio
    async def test_custom_window(self, store, now, minutes_ago):
        store.add_sample("A", 100.0, minutes_ago(20))

        short = await WindowAggregator(store, timedelta(minutes=10)).aggregate(now)
        long = await WindowAggregator(store, timedelta(minutes=30)).aggregate(now)

        assert short.short == {}
        assert long.short["A"].avg_hashrate == 100.0

    @pytest.mark.asyncio
    async def test_aware_now_is_normalized(self, store, now, minutes_ago):
        store.add_sample("A", 100.0, minutes_ago(1))
        aware = now.replace(tzinfo=timezone.utc).astimezone(timezone(timedelta(hours=3)))

        result = await WindowAggregator(store).aggregate(aware)

        assert result.short["A"].sample_count == 1

    def test_rejects_non_positive_window(self, store):
        with pytest.raises(ValueError):
            WindowAggregator(store, timedelta(0))
