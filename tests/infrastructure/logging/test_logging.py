"""Tests for structured logging and context propagation."""

import json
import logging

import pytest

from geo_explore.infrastructure.logging import (
    LoggingContext, get_logger, log_operation, pipeline_context, run_context,
    setup_logging, setup_simple_logging, stage_context,
)
from geo_explore.infrastructure.logging.formatters import HumanFormatter, JsonFormatter


class TestLoggingContext:
    """Nested pipeline and stage scopes."""

    def setup_method(self):
        """Reset contexts before each test."""
        run_context.set(None)
        pipeline_context.set(None)
        stage_context.set(None)

    def test_pipeline_and_stage_scopes(self):
        ctx = LoggingContext("run-123")

        with ctx.pipeline("point_pattern"):
            assert run_context.get() == "run-123"
            assert pipeline_context.get() == "point_pattern"

            with ctx.stage("density"):
                assert stage_context.get() == "density"
                assert ctx.current_node == "point_pattern/density"
                assert ctx.current_stage == "density"

            assert stage_context.get() is None

        assert pipeline_context.get() is None
        assert run_context.get() is None

    def test_timings_recorded(self):
        ctx = LoggingContext()

        with ctx.pipeline("p"):
            with ctx.stage("s"):
                with ctx.operation("op"):
                    pass

        timings = ctx.get_timings()
        assert set(timings) == {"p", "p/s", "p/s/op"}
        assert timings["p/s"]["status"] == "completed"

    def test_stage_failure_is_logged_and_reraised(self, caplog):
        ctx = LoggingContext()

        with caplog.at_level(logging.ERROR):
            with pytest.raises(RuntimeError):
                with ctx.pipeline("p"):
                    with ctx.stage("boom"):
                        raise RuntimeError("no data")

        assert ctx.get_timings()["p/boom"]["status"] == "failed"
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert errors and errors[0].context["error_type"] == "RuntimeError"
        assert errors[0].traceback


class TestStructuredLogger:
    """Records carry context for the formatters."""

    def test_context_attached(self, caplog):
        logger = get_logger("geo_explore.tests.context")
        ctx = LoggingContext("run-ctx")

        with caplog.at_level(logging.INFO, logger="geo_explore.tests.context"):
            with ctx.pipeline("time_series"):
                logger.info("inside", extra={'context': {'rows': 3}})

        record = next(r for r in caplog.records if r.getMessage() == "inside")
        assert record.context["run_id"] == "run-ctx"
        assert record.context["pipeline"] == "time_series"
        assert record.context["rows"] == 3

    def test_log_metrics(self, caplog):
        logger = get_logger("geo_explore.tests.metrics")

        with caplog.at_level(logging.INFO, logger="geo_explore.tests.metrics"):
            logger.log_metrics("counts", n_inside=50, n_illegal=3)

        assert caplog.records[-1].context["metrics"] == {'n_inside': 50, 'n_illegal': 3}

    def test_get_logger_is_cached(self):
        assert get_logger("geo_explore.tests.cache") is get_logger("geo_explore.tests.cache")

    def test_json_formatter(self):
        logger = get_logger("geo_explore.tests.json")
        record = logger.makeRecord("geo_explore.tests.json", logging.INFO, __file__, 1,
                                   "hello", None, None,
                                   extra={'context': {'stage': 'density'}, 'performance': None,
                                          'traceback': None})

        data = json.loads(JsonFormatter().format(record))

        assert data["message"] == "hello"
        assert data["context"] == {'stage': 'density'}

    def test_human_formatter_shows_stage(self):
        record = logging.LogRecord("geo_explore.x", logging.INFO, __file__, 1, "msg", None, None)
        record.context = {'run_id': 'abcdefgh1234', 'stage': 'envelope'}

        line = HumanFormatter(use_colors=False).format(record)

        assert "stage:envelope" in line
        assert "run:abcdefgh" in line


class TestLogOperation:
    """Decorator timing and error capture."""

    def test_success_logs_performance(self, caplog):
        @log_operation("double")
        def double(x):
            return 2 * x

        with caplog.at_level(logging.INFO):
            assert double(4) == 8

        perf = [r for r in caplog.records if getattr(r, 'performance', None)]
        assert perf[-1].performance['operation'] == 'double'

    def test_failure_reraised(self, caplog):
        @log_operation()
        def broken():
            raise ValueError("bad input")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError):
                broken()

        assert "Failed broken" in caplog.records[-1].getMessage()


def test_setup_logging_writes_json_file(test_config, tmp_path):
    setup_logging(test_config, run_id="file-run", console=False)
    get_logger("geo_explore.tests.file").info("to disk")

    log_file = tmp_path / 'logs' / 'geo_explore.log'
    for handler in logging.getLogger().handlers:
        handler.flush()
    lines = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert any(line['message'] == 'to disk' for line in lines)

    for handler in logging.getLogger().handlers[:]:
        logging.getLogger().removeHandler(handler)
        handler.close()
    run_context.set(None)


def test_setup_simple_logging_console_only():
    from geo_explore.infrastructure.logging.handlers import ConsoleHandler

    setup_simple_logging('WARNING')
    root = logging.getLogger()

    try:
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], ConsoleHandler)
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
