import os
import uuid

from dotenv import load_dotenv
from flask import Flask, request, g
from flask_cors import CORS
from flask_migrate import Migrate
from flasgger import Swagger
from prometheus_client import CollectorRegistry
from prometheus_flask_exporter import PrometheusMetrics
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

import extensions
from app import metrics as checkout_metrics
from app.api import register_api_v1
from app.cli import register_cli
from app.config import get_config_class
from app.errors import errors_bp
from app.logging import configure_logging
from app.telemetry import init_tracing
from app.version import API_PREFIX
from models import db

EXPOSED_HEADERS = ("X-Request-ID", "traceparent")


def _cors_origins(value):
    if not isinstance(value, str):
        return value or "*"
    value = value.strip()
    if value == "*":
        return "*"
    return [o.strip() for o in value.split(",") if o.strip()]


def _init_docs(app):
    Swagger(
        app,
        config={
            "headers": [],
            "specs": [
                {
                    "endpoint": "apispec",
                    "route": "/apispec.json",
                    "rule_filter": lambda rule: rule.rule.startswith(f"{API_PREFIX}/"),
                    "model_filter": lambda tag: True,
                }
            ],
            "swagger_ui": True,
            "specs_route": "/docs/",
        },
        template={
            "tags": [
                {"name": "Groups", "description": "Shopping rooms, contributions and checkout"},
                {"name": "Payments", "description": "UPI settlement and wallet checkout"},
                {"name": "Wallet", "description": "Member wallet"},
            ]
        },
    )


def _init_metrics(app):
    # Test apps get their own registry so several factories can coexist
    registry = CollectorRegistry() if app.config.get("TESTING") else None
    exporter = PrometheusMetrics(app, path="/metrics", registry=registry)
    if not app.config.get("TESTING") and not os.environ.get("METRICS_APP_INFO_SET"):
        exporter.info("app_info", "Application info", version="1.0.0")
        os.environ["METRICS_APP_INFO_SET"] = "1"


def _register_request_hooks(app):
    @app.before_request
    def _set_request_id():
        g.request_id = (request.headers.get("X-Request-ID") or uuid.uuid4().hex)[:100]
        app.logger.info(f"request start {request.method} {request.path}")

    @app.after_request
    def _decorate_response(resp):
        rid = getattr(g, "request_id", None)
        if rid:
            resp.headers["X-Request-ID"] = rid

        carrier = {}
        TraceContextTextMapPropagator().inject(carrier)
        if carrier.get("traceparent"):
            resp.headers["traceparent"] = carrier["traceparent"]

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        exposed = [h for h in resp.headers.get("Access-Control-Expose-Headers", "").split(",") if h.strip()]
        exposed += [h for h in EXPOSED_HEADERS if h not in exposed]
        resp.headers["Access-Control-Expose-Headers"] = ",".join(exposed)
        return resp


def create_app(config_object=None):
    """Application factory."""
    load_dotenv()
    app = Flask(__name__)
    app.config.from_object(config_object if config_object is not None else get_config_class())

    configure_logging(app)
    register_cli(app)

    extensions.limiter.init_app(app)
    app.limiter = extensions.limiter
    Migrate(app, db, compare_type=True, render_as_batch=True)
    _init_docs(app)
    _init_metrics(app)
    CORS(
        app,
        origins=_cors_origins(app.config.get("CORS_ALLOWED_ORIGINS", "*")),
        supports_credentials=True,
        expose_headers=list(EXPOSED_HEADERS),
    )

    app.register_blueprint(errors_bp)
    if app.config.get("TESTING"):
        from app.test_support import test_support_bp
        app.register_blueprint(test_support_bp)
    register_api_v1(app)
    _register_request_hooks(app)

    db.init_app(app)
    init_tracing(app)
    checkout_metrics.init_app(app)
    if app.config.get("DEBUG") or app.config.get("TESTING"):
        with app.app_context():
            db.create_all()
            app.logger.info("Tables created")

    @app.route("/health")
    def health():
        return {"status": "ok", "service": app.config.get("OTEL_SERVICE_NAME")}, 200

    return app
