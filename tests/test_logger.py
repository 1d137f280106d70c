"""Unit tests for structured logging."""
import json
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from logger import JSONFormatter, setup_logging


def _record(message, **extra):
    record = logging.LogRecord("services.retrieval_engine", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_record_as_json():
    data = json.loads(JSONFormatter().format(_record("Returning 3 chunks")))

    assert data["level"] == "INFO"
    assert data["logger"] == "services.retrieval_engine"
    assert data["message"] == "Returning 3 chunks"
    assert data["timestamp"].endswith("Z")


def test_includes_extra_fields():
    data = json.loads(JSONFormatter().format(_record("Generation failed", error_code="API_ERROR")))
    assert data["error_code"] == "API_ERROR"


def test_setup_logging_installs_single_json_handler():
    root_logger = logging.getLogger()
    previous = list(root_logger.handlers)
    try:
        setup_logging("DEBUG")
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JSONFormatter)
        assert root_logger.level == logging.DEBUG
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        for handler in previous:
            root_logger.addHandler(handler)
