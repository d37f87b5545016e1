from datetime import datetime, UTC
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Union


def utc_now() -> datetime:
    """Текущее время в UTC без tzinfo (как колонки TIMESTAMP в БД)"""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(dt: datetime) -> datetime:
    """Приводит datetime к наивному UTC"""
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def start_of_day_utc(now: datetime) -> datetime:
    """Начало календарных суток (00:00 UTC) для момента now"""
    return to_naive_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)


def round_half_up(value: float, digits: int = 0) -> Union[int, float]:
    """
    Округление "от нуля" как у ROUND(numeric) в PostgreSQL

    Args:
        value: Значение для округления
        digits: Количество знаков после запятой

    Returns:
        int при digits == 0, иначе float
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(rounded)
    return float(rounded)


def dig(data: Any, *keys: str) -> Any:
    """Безопасный доступ к вложенным полям словаря, None если чего-то нет"""
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def parse_int(value: Any) -> Optional[int]:
    """Целое из JSON значения (число или строка), иначе None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_text(value: Any) -> Optional[str]:
    """Текстовое представление скалярного JSON значения, иначе None"""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 строка -> наивный UTC datetime, иначе None"""
    if not isinstance(value, str) or not value:
        return None
    try:
        return to_naive_utc(datetime.fromisoformat(value))
    except ValueError:
        return None


__all__ = [
    "utc_now",
    "to_naive_utc",
    "start_of_day_utc",
    "round_half_up",
    "dig",
    "parse_int",
    "parse_text",
    "parse_timestamp",
]
