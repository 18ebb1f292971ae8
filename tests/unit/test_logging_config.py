"""Unit tests for logging configuration."""

import json
import logging

import pytest

from deutschmeister.utils.logging_config import (
    JsonFormatter,
    configure_logging,
    pipeline_stage_logger,
)


class TestJsonFormatter:
    """Test structured log records."""

    def test_format_includes_extra_fields(self):
        record = logging.LogRecord(
            name="deutschmeister.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Checked %d lessons",
            args=(40,),
            exc_info=None,
        )
        record.stage = "rules_pass"

        data = json.loads(JsonFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["logger"] == "deutschmeister.test"
        assert data["message"] == "Checked 40 lessons"
        assert data["extra"] == {"stage": "rules_pass"}

    def test_format_without_extra(self):
        record = logging.LogRecord(
            name="x", level=logging.WARNING, pathname=__file__, lineno=1,
            msg="plain", args=None, exc_info=None,
        )
        data = json.loads(JsonFormatter().format(record))
        assert "extra" not in data


class TestConfigureLogging:
    """Test configure_logging."""

    def test_console_and_file_handlers(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "run.log"
        configure_logging(level="DEBUG", log_file=log_file, json_format=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        assert all(isinstance(h.formatter, JsonFormatter) for h in root.handlers)

        logging.getLogger("deutschmeister.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["message"] == "hello"

    def test_no_console_output(self, restore_root_logger):
        configure_logging(level=logging.WARNING, console_output=False)
        assert logging.getLogger().handlers == []


class TestPipelineStageLogger:
    """Test the stage timing context manager."""

    def test_logs_start_and_completion(self, caplog):
        with caplog.at_level(logging.INFO, logger="deutschmeister.structural_pass"):
            with pipeline_stage_logger("structural_pass", lessons=3) as stage_logger:
                assert stage_logger.name == "deutschmeister.structural_pass"

        statuses = [record.status for record in caplog.records]
        assert statuses == ["started", "completed"]
        assert caplog.records[-1].lessons == 3

    def test_logs_failure_and_reraises(self, caplog):
        with caplog.at_level(logging.INFO, logger="deutschmeister.rules_pass"):
            with pytest.raises(RuntimeError):
                with pipeline_stage_logger("rules_pass"):
                    raise RuntimeError("boom")

        assert caplog.records[-1].status == "failed"
        assert caplog.records[-1].error == "boom"
