from __future__ import annotations

import json
import logging
import sys

from bulk_register.utils.logging import JsonFormatter, configure_logging

GAS_LIMIT = 210_000


def _record(exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="bulk_register.orchestrator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Registered %s",
        args=("alice",),
        exc_info=exc_info,
    )


def test_json_formatter_promotes_extra_fields() -> None:
    record = _record()
    record.domain = "alice"
    record.gas_limit = GAS_LIMIT

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "bulk_register.orchestrator"
    assert payload["message"] == "Registered alice"
    assert payload["domain"] == "alice"
    assert payload["gas_limit"] == GAS_LIMIT
    assert "time" in payload
    assert "pathname" not in payload
    assert "args" not in payload


def test_json_formatter_includes_traceback() -> None:
    try:
        raise RuntimeError("rpc down")
    except RuntimeError:
        record = _record(exc_info=sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: rpc down" in payload["exc_info"]


def test_configure_logging_quietens_web3() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(level="DEBUG", json_logs=True)

        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("web3").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
