"""Payment-method dispatcher for room contributions.

``submit_contribution`` routes a contribution to its settlement path and
returns either a persisted ``Contribution`` or, for UPI-family methods, an
open ``PaymentSession`` whose success is reported later through
``on_payment_success``. Functions here do NOT commit; routes wrap them in
``transactional`` so a failed settlement leaves nothing behind.
"""
import logging
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import db
from models.contribution import Contribution, PaymentSession, PAYMENT_METHODS
from models.member import Member
from models.cart import RoomCartItem
from app.metrics import CONTRIBUTIONS_RECORDED, DUPLICATE_CALLBACKS, PAYMENT_SESSIONS
from app.services import wallet_ops
from app.services.cart_store import RoomCartStore
from app.services.errors import (
    DuplicatePaymentCallback,
    InsufficientFunds,
    NotFound,
    RoomClosed,
    ValidationError,
)
from app.services.funding import item_target
from app.services.gateways import get_card_gateway, new_reference, upi_intent
from app.services.ledger import list_contributions, contributions_for_item
from app.services.money import display
from app.services.release_gate import refresh_state
from app.services.rooms import get_room, require_member
from app.tasks import dispatch_after_commit
from app.telemetry import payment_span
from app.tasks.notifications import notify_late_payment_task

logger = logging.getLogger(__name__)

UPI_METHODS = frozenset({"upi", "googlepay", "phonepe"})
OVERSHOOT_POLICIES = ("accept", "reject", "cap")


def _apply_overshoot_policy(room, item, amount):
    policy = current_app.config.get("CONTRIBUTION_OVERSHOOT_POLICY", "accept")
    if policy not in OVERSHOOT_POLICIES:
        raise RuntimeError(f"Unknown overshoot policy {policy!r}")
    if policy == "accept":
        return amount
    target = item_target(item, contributions_for_item(list_contributions(room.id), item.id))
    if amount <= target.remaining_amount:
        return amount
    if policy == "reject" or target.remaining_amount == 0:
        raise ValidationError(
            f"Contribution exceeds the remaining {display(target.remaining_amount)} for this item",
            details={"remainingAmount": target.remaining_amount},
        )
    return target.remaining_amount


def _already_recorded(contributor, item, transaction_id) -> bool:
    return db.session.query(
        Contribution.query.filter_by(
            contributor_id=contributor.id, cart_item_id=item.id, transaction_id=transaction_id
        ).exists()
    ).scalar()


def _record(room, item, contributor, amount, method, status, transaction_id=None):
    contribution = Contribution(
        room_id=room.id,
        cart_item_id=item.id,
        contributor_id=contributor.id,
        amount=amount,
        payment_method=method,
        status=status,
        transaction_id=transaction_id,
    )
    db.session.add(contribution)
    try:
        db.session.flush()
    except IntegrityError as e:
        raise ValidationError("Contribution already recorded for this transaction") from e
    room.bump_version()
    refresh_state(room)
    CONTRIBUTIONS_RECORDED.labels(method).inc()
    logger.info(
        "Contribution %s recorded: room=%s item=%s amount=%s method=%s",
        contribution.id, room.id, item.id, amount, method,
    )
    return contribution


def submit_contribution(room, item_id, amount, method, contributor, *, transaction_id=None, card_token=None):
    """Settle a contribution toward one cart item.

    Returns ``("recorded", Contribution)`` or ``("pending", PaymentSession)``.
    """
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"Unsupported payment method {method!r}")
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise ValidationError("Contribution amount must be positive")
    if room.is_placed:
        raise RoomClosed("Order already placed for this room")
    require_member(room, contributor)
    item = RoomCartStore(room).get(item_id)
    amount = _apply_overshoot_policy(room, item, amount)

    if method == "wallet":
        balance = wallet_ops.get_balance(contributor.id)
        if balance < amount:
            raise InsufficientFunds(f"Insufficient wallet balance: {display(balance)} available")
        if transaction_id and _already_recorded(contributor, item, transaction_id):
            raise ValidationError(
                "Transaction id already used for this item",
                details={"transactionId": transaction_id},
            )
        reference = transaction_id or f"WLT{room.id}_ITM{item.id}_{datetime.utcnow():%Y%m%d%H%M%S%f}"
        wallet_ops.adjust_member_balance(
            contributor.id,
            -amount,
            reference=reference,
            type="debit",
            source="contribution",
        )
        return "recorded", _record(room, item, contributor, amount, method, "confirmed", reference)

    if method == "cod":
        if not room.is_single_recipient:
            raise ValidationError("Cash on delivery needs a single delivery recipient")
        return "recorded", _record(room, item, contributor, amount, method, "confirmed")

    if method == "card":
        if not card_token:
            raise ValidationError("cardToken is required for card payments")
        reference = new_reference("CRD", room.id, item.id, contributor.id)
        with payment_span("card.charge", reference=reference, room_id=room.id, amount=amount):
            charge_id = get_card_gateway().charge(token=card_token, amount=amount, reference=reference)
        return "recorded", _record(room, item, contributor, amount, method, "confirmed", charge_id)

    if method in UPI_METHODS:
        return "pending", open_payment_session(room, item, amount, method, contributor)
    raise ValidationError(f"Unsupported payment method {method!r}")


def open_payment_session(room, item, amount, method, contributor) -> PaymentSession:
    reference_id = new_reference("GRP", room.id, item.id, contributor.id)
    ttl = current_app.config.get("UPI_SESSION_TTL_HOURS", 24)
    session = PaymentSession(
        reference_id=reference_id,
        room_id=room.id,
        cart_item_id=item.id,
        contributor_id=contributor.id,
        amount=amount,
        payment_method=method,
        status="open",
        upi_intent=upi_intent(reference_id, amount, room.id),
        expires_at=datetime.utcnow() + timedelta(hours=ttl),
    )
    db.session.add(session)
    db.session.flush()
    PAYMENT_SESSIONS.labels("opened").inc()
    logger.info("Payment session %s opened for room %s item %s", reference_id, room.id, item.id)
    return session


def get_session(reference_id, *, for_update=False) -> PaymentSession:
    q = PaymentSession.query.filter_by(reference_id=reference_id)
    if for_update:
        q = q.with_for_update()
    session = q.first()
    if not session:
        raise NotFound("Payment session not found")
    return session


def on_payment_success(reference_id, provider_transaction_id=None):
    """Record the contribution for a settled UPI session, once.

    Returns ``("recorded", Contribution)``, or ``("refunded", PaymentSession)``
    when the room was placed (or the item removed) before the payment landed. Raises
    ``DuplicatePaymentCallback`` if the session was already settled.
    """
    session = get_session(reference_id, for_update=True)
    if session.status in ("succeeded", "refunded"):
        DUPLICATE_CALLBACKS.inc()
        existing = db.session.get(Contribution, session.contribution_id) if session.contribution_id else None
        logger.info("Duplicate payment callback for %s suppressed", reference_id)
        raise DuplicatePaymentCallback(reference_id, existing)

    previous = session.status
    session.provider_transaction_id = provider_transaction_id
    session.settled_at = datetime.utcnow()
    # Room row lock serialises settlement with place_order.
    room = get_room(session.room_id, for_update=True)
    item = None
    if session.cart_item_id is not None:
        item = RoomCartItem.query.filter_by(id=session.cart_item_id, order_id=None).first()
    if room.is_placed or item is None:
        # Nothing left to fund; give the money back through the wallet.
        wallet_ops.adjust_member_balance(
            session.contributor_id,
            int(session.amount),
            reference=reference_id,
            type="refund",
            source="reconciliation",
        )
        session.status = "refunded"
        PAYMENT_SESSIONS.labels("refunded").inc()
        logger.warning("Payment %s has no open cart item in room %s; refunded to wallet", reference_id, room.id)
        dispatch_after_commit(notify_late_payment_task, reference_id, "refunded")
        return "refunded", session

    contributor = _contributor(session.contributor_id)
    contribution = _record(
        room, item, contributor, int(session.amount), session.payment_method, "contributed", reference_id
    )
    session.status = "succeeded"
    PAYMENT_SESSIONS.labels("succeeded").inc()
    session.contribution_id = contribution.id
    if previous != "open":
        logger.warning("Payment %s reconciled after its session was %s", reference_id, previous)
        dispatch_after_commit(notify_late_payment_task, reference_id, "recorded")
    return "recorded", contribution


def abandon_session(reference_id, member):
    """Mark a session abandoned when the payer closes the payment modal.

    The external payment may still complete; ``on_payment_success`` accepts
    it later.
    """
    session = get_session(reference_id, for_update=True)
    if session.contributor_id != member.id:
        raise NotFound("Payment session not found")
    if session.status == "open":
        session.status = "abandoned"
        PAYMENT_SESSIONS.labels("abandoned").inc()
    return session


def _contributor(member_id):
    member = db.session.get(Member, member_id)
    if not member:
        raise NotFound("Contributor not found")
    return member
