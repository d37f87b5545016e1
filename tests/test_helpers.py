"""
Тесты для модуля helpers.py
"""
import pytest
from datetime import datetime, timezone, timedelta

from scavenger_dashboard.utils.helpers import (
    utc_now,
    to_naive_utc,
    start_of_day_utc,
    round_half_up,
    dig,
    parse_int,
    parse_text,
    parse_timestamp,
)


class TestTimeHelpers:
    """Работа со временем"""

    def test_utc_now_is_naive(self):
        assert utc_now().tzinfo is None

    def test_to_naive_utc_converts_offset(self):
        aware = datetime(2026, 10, 18, 2, 30, tzinfo=timezone(timedelta(hours=5)))
        assert to_naive_utc(aware) == datetime(2026, 10, 17, 21, 30)

    def test_to_naive_utc_keeps_naive(self):
        naive = datetime(2026, 10, 18, 2, 30)
        assert to_naive_utc(naive) is naive

    def test_start_of_day_utc(self):
        assert start_of_day_utc(datetime(2026, 10, 18, 23, 59, 59, 999)) == datetime(2026, 10, 18)

    def test_start_of_day_uses_utc_date(self):
        # 01:00 по Москве - ещё предыдущие сутки UTC
        moscow = datetime(2026, 10, 18, 1, 0, tzinfo=timezone(timedelta(hours=3)))
        assert start_of_day_utc(moscow) == datetime(2026, 10, 17)


class TestRounding:
    """Округление как в PostgreSQL"""

    @pytest.mark.parametrize("value, digits, expected", [
        (17.647058823529413, 2, 17.65),
        (82.35294117647058, 2, 82.35),
        (0.125, 2, 0.13),
        (2.5, 0, 3),
        (3.5, 0, 4),
        (89999.6, 0, 90000),
        (0.0, 2, 0.0),
    ])
    def test_round_half_up(self, value, digits, expected):
        assert round_half_up(value, digits) == expected

    def test_zero_digits_returns_int(self):
        assert isinstance(round_half_up(1.2), int)


class TestJsonHelpers:
    """Безопасный разбор JSON значений"""

    def test_dig_nested(self):
        assert dig({"a": {"b": {"c": 1}}}, "a", "b", "c") == 1

    @pytest.mark.parametrize("data", [None, [], "text", {"a": None}, {"a": []}, {"a": {"x": 1}}])
    def test_dig_missing(self, data):
        assert dig(data, "a", "b") is None

    @pytest.mark.parametrize("value, expected", [
        (5, 5), ("5", 5), (" 12 ", 12), ("five", None), (True, None), (2.5, None), (None, None),
    ])
    def test_parse_int(self, value, expected):
        assert parse_int(value) == expected

    @pytest.mark.parametrize("value, expected", [
        ("000FFFFF", "000FFFFF"), (42, "42"), (False, "false"), ({"x": 1}, None), (None, None),
    ])
    def test_parse_text(self, value, expected):
        assert parse_text(value) == expected

    @pytest.mark.parametrize("value, expected", [
        ("2026-10-18T11:00:00Z", datetime(2026, 10, 18, 11, 0)),
        ("2026-10-18T11:00:00.500000", datetime(2026, 10, 18, 11, 0, 0, 500000)),
        ("2026-10-18", datetime(2026, 10, 18)),
        ("not a date", None),
        ("", None),
        (1760000000, None),
    ])
    def test_parse_timestamp(self, value, expected):
        assert parse_timestamp(value) == expected
