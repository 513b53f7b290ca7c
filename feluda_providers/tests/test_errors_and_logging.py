from __future__ import annotations

import json
import logging
import types

import pytest

from feluda_providers.base.errors import (
    ErrorCode,
    ProviderError,
    as_provider_error,
    classify_exception,
    invalid_model,
    no_content,
)
from feluda_providers.base.log_support import JsonFormatter
from feluda_providers.base.logging import (
    LogContext,
    get_logger,
    log_event,
    logged_phase,
    normalized_log_event,
    REQUIRED_NORMALIZED_KEYS,
)


def test_classify_provider_error_passthrough():
    e = ProviderError(code=ErrorCode.AUTH, message="nope", provider="x")
    assert classify_exception(e) is ErrorCode.AUTH


def test_classify_http_status_mapping():
    assert classify_exception(types.SimpleNamespace(status_code=404)) is ErrorCode.NOT_FOUND
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e2) is ErrorCode.UNAVAILABLE
    assert classify_exception(types.SimpleNamespace(status=429)) is ErrorCode.RATE_LIMIT


def test_classify_heuristics_and_fallback():
    assert classify_exception(Exception("rate limit exceeded")) is ErrorCode.RATE_LIMIT
    assert classify_exception(Exception("timed out waiting")) is ErrorCode.TIMEOUT
    assert classify_exception(TimeoutError()) is ErrorCode.TIMEOUT
    assert classify_exception(Exception("Invalid API key")) is ErrorCode.AUTH
    assert classify_exception(Exception("something odd")) is ErrorCode.TRANSPORT


def test_as_provider_error_keeps_message():
    exc = RuntimeError("upstream said: model overloaded")
    err = as_provider_error(exc, provider="groq", model="m")
    assert err.message == str(exc)
    assert err.code is ErrorCode.UNAVAILABLE
    assert err.raw is exc
    assert err.upstream
    assert as_provider_error(err) is err
    assert not invalid_model("x").upstream


def test_error_helpers():
    assert invalid_model("gpt-4o").message == "Invalid model selected"
    assert no_content("groq", "m").code is ErrorCode.NO_CONTENT
    assert str(no_content()) == "No content generated"
    assert no_content("groq", "m").describe() == "groq:m no_content: No content generated"


def test_get_logger_prefixes_names():
    assert get_logger("dispatch").name == "feluda.dispatch"
    assert get_logger("feluda.x").name == "feluda.x"


def test_normalized_event_has_canonical_keys(test_logger, caplog):
    ctx = LogContext(provider="groq", model="m", request_id="r1")
    with caplog.at_level(logging.INFO, logger=test_logger.name):
        normalized_log_event(test_logger, "dispatch.start", ctx, phase="start", emitted=None, extra_key=1, phase_override=None)
    payload = json.loads(caplog.records[-1].getMessage())
    for key in REQUIRED_NORMALIZED_KEYS:
        if key != "error_code":
            assert key in payload
    assert payload["provider"] == "groq"
    assert payload["request_id"] == "r1"
    assert payload["extra_key"] == 1
    assert "phase_override" not in payload


def test_log_event_drops_none(test_logger, caplog):
    with caplog.at_level(logging.INFO, logger=test_logger.name):
        log_event(test_logger, "x", None, a=None, b=2)
    assert json.loads(caplog.records[-1].getMessage()) == {"event": "x", "b": 2}


def test_logged_phase_logs_error_and_reraises(test_logger, caplog):
    with caplog.at_level(logging.INFO, logger=test_logger.name):
        with pytest.raises(ValueError):
            with logged_phase(test_logger, "op"):
                raise ValueError("429 rate limit")
    events = [json.loads(r.getMessage()) for r in caplog.records]
    assert [e["event"] for e in events] == ["op.start", "op.error"]
    assert events[-1]["error_code"] == "rate_limit"


def test_json_formatter_hoists_event_fields():
    record = logging.LogRecord("feluda.t", logging.WARNING, __file__, 1, json.dumps({"event": "e", "n": 3}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e"
    assert out["n"] == 3
    assert out["level"] == "WARNING"
    assert out["logger"] == "feluda.t"


def test_configure_logger_file_handler(tmp_path):
    from logging.handlers import RotatingFileHandler

    from feluda_providers.base.logging import configure_logger

    path = tmp_path / "logs" / "feluda.jsonl"
    logger = configure_logger(level="WARNING", file_path=str(path))
    try:
        assert logger.level == logging.WARNING
        log_event(get_logger("files"), "disk.event", level=logging.ERROR, n=1)
        for handler in logger.handlers:
            handler.flush()
        line = path.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["event"] == "disk.event"
    finally:
        configure_logger(level=logging.INFO, file_path=None)
    assert not any(isinstance(h, RotatingFileHandler) for h in logger.handlers)


def test_log_context_flattens_extra():
    ctx = LogContext(provider="openrouter", binding="openrouter_stream", extra={"attempt_id": 2, "skip": None})
    assert ctx.to_dict() == {"provider": "openrouter", "binding": "openrouter_stream", "attempt_id": 2}
