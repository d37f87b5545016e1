# scavenger_dashboard/utils/logging_config.py
"""
Конфигурация логирования для приложения
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
import json
from datetime import datetime, UTC
from typing import Dict, Any, Optional

from scavenger_dashboard.utils.config import settings

# Стандартные атрибуты LogRecord, которые не нужно дублировать в JSON
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Форматировщик логов в JSON"""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        # Добавляем extra поля (event, container_id и т.д.)
        for key, value in record.__dict__.items():
            if key not in log_record and key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_record[key] = value

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """Цветной форматировщик для консоли"""

    COLORS = {
        'DEBUG': '\033[36m',  # Cyan
        'INFO': '\033[32m',  # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',  # Red
        'CRITICAL': '\033[41m',  # Red background
        'RESET': '\033[0m',  # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        log_time = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        message = super().format(record)

        return f"{log_time} {color}{record.levelname:8s}{reset} [{record.name}] {message}"


def setup_logging(log_dir: Optional[str] = None, log_to_file: Optional[bool] = None) -> logging.Logger:
    """
    Настройка логирования для приложения

    Args:
        log_dir: Директория для файлов логов (по умолчанию из настроек)
        log_to_file: Писать ли логи в файлы (по умолчанию из настроек)

    Returns:
        Корневой логгер
    """
    level = logging.DEBUG if settings.debug else logging.INFO
    log_dir = log_dir if log_dir is not None else settings.log_dir
    log_to_file = settings.log_to_file if log_to_file is None else log_to_file

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    # Консольный обработчик
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColorFormatter('%(message)s'))
    logger.addHandler(console_handler)

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Основной файл (ротация по размеру)
        file_handler = RotatingFileHandler(
            filename=log_path / "scavenger_dashboard.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

        # Предупреждения и ошибки (отдельный файл)
        error_handler = RotatingFileHandler(
            filename=log_path / "errors.log",
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.WARNING)
        error_handler.setFormatter(JSONFormatter())
        logger.addHandler(error_handler)

    # Внешние библиотеки
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)

    logger.info("Логирование настроено")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Получение логгера с заданным именем

    Args:
        name: Имя логгера

    Returns:
        Настроенный логгер
    """
    return logging.getLogger(name)


class StructuredLogger:
    """
    Логгер для структурированного логирования
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)

    def _log_with_context(self, level: int, msg: str, exc_info: bool = False, **kwargs):
        """Логирование с дополнительным контекстом"""
        # Контекст уходит в extra и попадает в JSON запись
        self.logger.log(level, msg, extra=kwargs, exc_info=exc_info, stacklevel=3)

    def info(self, msg: str, **kwargs):
        self._log_with_context(logging.INFO, msg, **kwargs)

    def debug(self, msg: str, **kwargs):
        self._log_with_context(logging.DEBUG, msg, **kwargs)

    def warning(self, msg: str, **kwargs):
        self._log_with_context(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, exc_info: bool = False, **kwargs):
        self._log_with_context(logging.ERROR, msg, exc_info=exc_info, **kwargs)

    def critical(self, msg: str, exc_info: bool = False, **kwargs):
        self._log_with_context(logging.CRITICAL, msg, exc_info=exc_info, **kwargs)

    def report_built(self, rows: int, window_seconds: int, duration_ms: float, **kwargs):
        """Логирование построения отчёта"""
        self.info(f"Отчёт построен: {rows} контейнеров",
                  event="report_built",
                  rows=rows,
                  window_seconds=window_seconds,
                  duration_ms=duration_ms,
                  **kwargs)

    def sample_ingested(self, container_id: Optional[str], miner_id: Optional[str], hash_rate: float, **kwargs):
        """Логирование записи замера хэшрейта"""
        self.debug(f"Замер хэшрейта записан: {container_id}/{miner_id}",
                   event="sample_ingested",
                   container_id=container_id,
                   miner_id=miner_id,
                   hash_rate=hash_rate,
                   **kwargs)

    def api_call_ingested(self, container_id: Optional[str], endpoint: str, **kwargs):
        """Логирование записи вызова API"""
        self.debug(f"Вызов API записан: {container_id} {endpoint}",
                   event="api_call_ingested",
                   container_id=container_id,
                   endpoint=endpoint,
                   **kwargs)
