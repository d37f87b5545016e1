"""
Тесты для logging_config.py
"""
import json
import logging

import pytest

from scavenger_dashboard.utils.logging_config import JSONFormatter, StructuredLogger, setup_logging


@pytest.fixture
def restore_root_logger():
    """Возвращаем обработчики корневого логгера после теста"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Форматирование записей в JSON"""

    def test_extra_fields_are_included(self):
        record = logging.LogRecord("report", logging.INFO, __file__, 10, "Отчёт построен", (), None)
        record.event = "report_built"
        record.rows = 3

        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "Отчёт построен"
        assert payload["event"] == "report_built"
        assert payload["rows"] == 3
        assert "args" not in payload


class TestStructuredLogger:
    """Структурированное логирование"""

    def test_report_built_event(self, caplog):
        logger = StructuredLogger("test.report")

        with caplog.at_level(logging.INFO, logger="test.report"):
            logger.report_built(rows=2, window_seconds=600, duration_ms=1.5)

        record = caplog.records[-1]
        assert record.event == "report_built"
        assert record.rows == 2
        assert record.window_seconds == 600

    def test_error_with_exc_info(self, caplog):
        logger = StructuredLogger("test.errors")

        with caplog.at_level(logging.ERROR, logger="test.errors"):
            try:
                raise ValueError("boom")
            except ValueError:
                logger.error("Ошибка", exc_info=True, event="test_error")

        assert caplog.records[-1].exc_info is not None
        assert caplog.records[-1].event == "test_error"


class TestSetupLogging:
    """Настройка обработчиков"""

    def test_console_only(self, restore_root_logger, tmp_path):
        root = setup_logging(log_dir=str(tmp_path), log_to_file=False)

        assert len(root.handlers) == 1
        assert not any(tmp_path.iterdir())

    def test_file_handlers(self, restore_root_logger, tmp_path):
        root = setup_logging(log_dir=str(tmp_path / "logs"), log_to_file=True)

        assert len(root.handlers) == 3
        assert (tmp_path / "logs" / "scavenger_dashboard.log").exists()
