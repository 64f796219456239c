import json
import logging

from lendaria.core.logging import JsonFormatter, UnifiedFormatter, get_logger


def _record(msg, **extra):
    record = logging.LogRecord("lendaria.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_unified_formatter_appends_context():
    line = UnifiedFormatter().format(_record("Jobs found: 3", table="jobs"))
    assert "[Backend] [INFO] [lendaria.test] Jobs found: 3" in line
    assert line.endswith("| table=jobs")


def test_json_formatter_serializes_structured_messages():
    payload = json.loads(JsonFormatter(fmt="%(message)s").format(_record({"event": "voice_capture_error"}, field_id="bio")))

    assert payload["service"] == "lendaria-backend"
    assert payload["level"] == "INFO"
    assert payload["field_id"] == "bio"
    assert payload["event"] == "voice_capture_error"


def test_get_logger_returns_named_logger():
    assert get_logger("lendaria.voice").name == "lendaria.voice"
