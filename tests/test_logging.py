"""
Tests for the logging module.
"""

from __future__ import annotations

import json
import logging

from jobwatch.config import LoggingConfig
from jobwatch.logging import JSONFormatter, TextFormatter, configure_logging, get_logger


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("jobwatch.test", logging.WARNING, __file__, 1, "Job %s", ("died",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestGetLogger:
    """Logger namespacing."""

    def test_namespaced(self):
        assert get_logger().name == "jobwatch"
        assert get_logger("runner").name == "jobwatch.runner"
        assert get_logger("jobwatch.events.bus").name == "jobwatch.events.bus"


class TestFormatters:
    """JSON and text output."""

    def test_json_formatter_includes_extras(self):
        output = json.loads(JSONFormatter().format(make_record(job_id="some/job")))

        assert output["level"] == "WARNING"
        assert output["logger"] == "jobwatch.test"
        assert output["message"] == "Job died"
        assert output["job_id"] == "some/job"
        assert "timestamp" in output

    def test_text_formatter(self):
        line = TextFormatter(use_colors=False).format(make_record(job_id="some/job"))

        assert "WARNING" in line
        assert "jobwatch.test: Job died" in line
        assert "job_id=some/job" in line
        assert "\033[" not in line


class TestConfigureLogging:
    """Handler installation."""

    def test_configure_replaces_own_handler(self):
        logger = configure_logging(LoggingConfig(level="DEBUG", format="json"))
        configure_logging(LoggingConfig(level="WARNING", format="text"))

        own = [h for h in logger.handlers if getattr(h, "_jobwatch_handler", False)]
        try:
            assert len(own) == 1
            assert isinstance(own[0].formatter, TextFormatter)
            assert logger.level == logging.WARNING
        finally:
            for handler in own:
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
