"""Prometheus collectors for checkout plus the DB/HTTP hooks behind them.

Request-level metrics come from ``prometheus_flask_exporter``; the counters
here track what happens to money: contributions written, UPI sessions
settled or refunded, and orders released.
"""
import time

from flask import request
from prometheus_client import Counter, Histogram
from sqlalchemy import event

from models import db

CONTRIBUTIONS_RECORDED = Counter(
    "contributions_recorded_total",
    "Contributions written to the ledger",
    ["method"],
)

PAYMENT_SESSIONS = Counter(
    "payment_sessions_total",
    "UPI payment session transitions",
    ["outcome"],
)

DUPLICATE_CALLBACKS = Counter(
    "payment_duplicate_callbacks_total",
    "Payment success callbacks suppressed as duplicates",
)

ORDERS_PLACED = Counter(
    "group_orders_placed_total",
    "Group orders released by the order gate",
)

LEDGER_WAIT = Histogram(
    "ledger_longpoll_wait_seconds",
    "Time a ledger long-poll was held before answering",
    buckets=(0.1, 0.5, 1, 2, 5, 10, 20, 30),
)

DB_QUERY_DURATION = Histogram(
    "db_query_duration_seconds",
    "Database query duration in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

ERROR_COUNTER = Counter(
    "flask_error_total",
    "Count of HTTP responses with status >= 400",
    ["endpoint", "method", "code"],
)

_QUERY_STARTS = "_query_start_time"


def _time_queries(engine):
    @event.listens_for(engine, "before_cursor_execute")
    def _start(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault(_QUERY_STARTS, []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def _stop(conn, cursor, statement, parameters, context, executemany):
        starts = conn.info.get(_QUERY_STARTS)
        if starts:
            DB_QUERY_DURATION.observe(time.perf_counter() - starts.pop())


def init_app(app):
    """Time every DB query and count error responses per endpoint."""
    with app.app_context():
        _time_queries(db.engine)

    @app.after_request
    def _count_errors(resp):
        if resp.status_code >= 400:
            ERROR_COUNTER.labels(request.endpoint or "unknown", request.method, resp.status_code).inc()
        return resp
