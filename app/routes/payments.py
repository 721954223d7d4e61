import hashlib
import hmac
import logging

from flask import Blueprint, request, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.version import API_PREFIX
from app.schemas.contribution import ContributionCreateRequest, PaymentCallbackRequest
from app.schemas.room import CheckoutRequest
from app.services import dispatcher
from app.services.errors import DuplicatePaymentCallback, Forbidden, ValidationError
from app.utils import ok, auth_required, role_required, transactional, validate_schema, current_member
from app.routes.groups.checkout import place_room_order
from app.telemetry import payment_span

payments_bp = Blueprint("payments", __name__, url_prefix=API_PREFIX)

logger = logging.getLogger(__name__)


def _settle(reference_id, provider_transaction_id=None):
    """Apply a payment success and build the response, treating repeats as success."""
    with payment_span("upi.settle", reference=reference_id, provider_transaction=provider_transaction_id) as span:
        try:
            with transactional("Payment settlement failed"):
                outcome, record = dispatcher.on_payment_success(reference_id, provider_transaction_id)
        except DuplicatePaymentCallback as dup:
            span.set_attribute("payment.outcome", "duplicate")
            contribution = dup.contribution.to_dict() if dup.contribution is not None else None
            return ok({"duplicate": True, "contribution": contribution}, message="Payment already recorded")
        span.set_attribute("payment.outcome", outcome)
    if outcome == "refunded":
        return ok({"refunded": True, "paymentSession": record.to_dict()},
                  message="Order already placed; amount refunded to wallet")
    return ok({"duplicate": False, "contribution": record.to_dict()}, message="Contribution added", status=201)


def _verify_signature():
    secret = current_app.config.get("UPI_WEBHOOK_SECRET")
    if not secret:
        return
    expected = hmac.new(secret.encode(), request.get_data(), hashlib.sha256).hexdigest()
    supplied = request.headers.get("X-Signature", "")
    if not hmac.compare_digest(expected, supplied):
        logger.warning("Rejected payment callback with bad signature from %s", get_remote_address())
        raise Forbidden("Invalid callback signature")


@payments_bp.route("/contributions/create", methods=["POST"])
@auth_required
@role_required(["member:contribute", "admin"])
@limiter.limit(
    lambda: current_app.config["CONTRIBUTION_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many contributions from this IP",
)
@validate_schema(ContributionCreateRequest)
def create_contribution_from_payment():
    """Client-reported UPI success; ``transactionId`` is the session reference."""
    data: ContributionCreateRequest = request.validated_data
    member = current_member()
    session = dispatcher.get_session(data.transaction_id)
    if session.contributor_id != member.id:
        raise Forbidden("Payment session belongs to another member")
    mismatched = [
        name for name, expected, given in (
            ("roomId", session.room_id, data.room_id),
            ("cartItemId", session.cart_item_id, data.cart_item_id),
            ("amount", int(session.amount), data.amount),
            ("paymentMethod", session.payment_method, data.payment_method),
        )
        if expected is not None and expected != given
    ]
    if mismatched:
        raise ValidationError("Payment does not match its session", details={"mismatched": mismatched})
    return _settle(data.transaction_id)


@payments_bp.route("/payments/upi/callback", methods=["POST"])
@validate_schema(PaymentCallbackRequest)
def upi_callback():
    _verify_signature()
    data: PaymentCallbackRequest = request.validated_data
    return _settle(data.reference_id, data.provider_transaction_id)


@payments_bp.route("/payments/upi/<reference_id>", methods=["DELETE"])
@auth_required
@role_required(["member", "admin"])
def abandon_payment(reference_id):
    with transactional("Failed to close payment session"):
        session = dispatcher.abandon_session(reference_id, current_member())
    return ok(session.to_dict(), message="Payment session closed")


@payments_bp.route("/wallet/checkout", methods=["POST"])
@auth_required
@role_required(["member:place_order", "admin"])
@limiter.limit(
    lambda: current_app.config["ORDER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
@validate_schema(CheckoutRequest)
def wallet_checkout():
    data: CheckoutRequest = request.validated_data
    return place_room_order(data.room_id)
