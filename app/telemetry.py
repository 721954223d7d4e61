"""OpenTelemetry setup plus a tracer for the payment paths.

Flask, SQLAlchemy and outgoing ``requests`` calls are instrumented
automatically; settlement code opens its own spans through ``payment_span``
so a card charge or a UPI callback shows up as one unit in the trace.
"""
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from models import db

TRACER_NAME = "roomcart.payments"


def _span_exporter(app):
    if app.config.get("TESTING"):
        return ConsoleSpanExporter()
    return OTLPSpanExporter(endpoint=app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces"))


def init_tracing(app):
    """Install the tracer provider and instrument Flask, the DB engine and gateway calls."""
    resource = Resource.create({"service.name": app.config.get("OTEL_SERVICE_NAME", "roomcart-backend")})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(_span_exporter(app)))
    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())

    FlaskInstrumentor().instrument_app(app)
    requests_instrumentor = RequestsInstrumentor()
    if not requests_instrumentor.is_instrumented_by_opentelemetry:
        requests_instrumentor.instrument()
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)


def get_tracer():
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def payment_span(name, **attributes):
    """Span around one settlement step; attributes are prefixed with ``payment.``."""
    with get_tracer().start_as_current_span(name) as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(f"payment.{key}", value)
        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
            raise
