"""App-wide error handlers; every failure leaves as the JSON error envelope."""
import logging

from flask import Blueprint
from werkzeug.exceptions import HTTPException

from app.services.errors import CheckoutError
from app.utils.responses import error

logger = logging.getLogger(__name__)

errors_bp = Blueprint("errors_bp", __name__)

RETRY_AFTER_SECONDS = 5


@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    return error(e.description or e.name, status=e.code, code=e.code)


@errors_bp.app_errorhandler(CheckoutError)
def handle_checkout_error(e):
    level = logging.WARNING if e.status >= 500 else logging.INFO
    logger.log(level, "%s: %s", type(e).__name__, e.message)
    resp, status = error(e.message, status=e.status, code=type(e).__name__, details=e.details)
    if getattr(e, "retryable", False):
        resp.headers["Retry-After"] = str(RETRY_AFTER_SECONDS)
    return resp, status


@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logger.exception("Unhandled exception")
    return error("An unexpected error occurred. Please try again later.", status=500, code=500)
