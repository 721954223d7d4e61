"""Structured JSON logging.

Every record carries the request id, the OpenTelemetry trace/span ids and,
inside a room-scoped request, the room id. Dict messages are merged into the
JSON line with payment secrets and personal details redacted.
"""
import json
import logging
import os
from typing import Any

from flask import g, has_request_context, request
from opentelemetry.trace import get_current_span

REDACTED = "[REDACTED]"

SENSITIVE_KEYS = frozenset({
    "token", "access", "refresh", "access_token", "refresh_token",
    "card_token", "cardToken", "password",
    "upi_vpa", "upiString", "upi_intent",
    "address_line1", "addressLine1", "address_line2", "addressLine2",
})
# Shown with only the last four characters
PARTIAL_KEYS = frozenset({"phone", "transaction_id", "transactionId", "provider_transaction_id"})


def current_request_id() -> str:
    if not has_request_context():
        return "n/a"
    return getattr(g, "request_id", None) or "n/a"


def current_room_id():
    if not has_request_context():
        return None
    view_args = request.view_args or {}
    return view_args.get("room_id")


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        record.room_id = current_room_id()
        return True


def current_trace_ids():
    ctx = get_current_span().get_span_context()
    if not ctx.is_valid:
        return "n/a", "n/a"
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id, record.span_id = current_trace_ids()
        return True


def _tail(value: Any) -> str:
    text = str(value)
    return "*" * max(0, len(text) - 4) + text[-4:]


def mask(data: Any) -> Any:
    """Return ``data`` with sensitive keys redacted, recursing into containers."""
    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if key in SENSITIVE_KEYS:
                masked[key] = REDACTED
            elif key in PARTIAL_KEYS and value is not None:
                masked[key] = _tail(value)
            else:
                masked[key] = mask(value)
        return masked
    if isinstance(data, (list, tuple)):
        return type(data)(mask(v) for v in data)
    return data


class MaskingFilter(logging.Filter):
    """Redact dict log messages; DEBUG records stay readable outside production."""

    def filter(self, record: logging.LogRecord) -> bool:
        env = os.getenv("APP_ENV", "development").lower()
        if record.levelno == logging.DEBUG and env != "production":
            return True
        if isinstance(record.msg, dict):
            record.msg = mask(record.msg)
        if isinstance(record.args, dict):
            record.args = mask(record.args)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        line = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "request_id": getattr(record, "request_id", "n/a"),
            "trace_id": getattr(record, "trace_id", "n/a"),
            "span_id": getattr(record, "span_id", "n/a"),
        }
        room_id = getattr(record, "room_id", None)
        if room_id is not None:
            line["room_id"] = room_id
        if isinstance(record.msg, dict):
            line.update(record.msg)
        else:
            line["message"] = record.getMessage()
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def _log_level(app) -> int:
    name = os.getenv("LOG_LEVEL")
    if name:
        return getattr(logging, name.upper(), logging.INFO)
    return logging.DEBUG if app.config.get("DEBUG") else logging.INFO


def configure_logging(app) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    for f in (RequestContextFilter(), TraceIdFilter(), MaskingFilter()):
        handler.addFilter(f)

    level = _log_level(app)
    app.logger.handlers.clear()
    app.logger.addHandler(handler)
    app.logger.setLevel(level)

    root = logging.getLogger()
    if not any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        root.addHandler(handler)
    root.setLevel(level)

    werkzeug_logger = logging.getLogger("werkzeug")
    werkzeug_logger.setLevel(level)
    werkzeug_logger.handlers.clear()
    werkzeug_logger.addHandler(handler)
