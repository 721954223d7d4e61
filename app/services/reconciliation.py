"""Housekeeping for UPI payment sessions.

Open sessions past their expiry are marked ``expired``. Expired and
abandoned sessions stay eligible for a late success callback, which either
records the contribution or refunds the payer's wallet.
"""
import logging
from datetime import datetime

from models.contribution import PaymentSession
from app.metrics import PAYMENT_SESSIONS

logger = logging.getLogger(__name__)


def expire_stale_sessions(now=None) -> int:
    """Mark overdue open sessions expired. Does NOT commit."""
    now = now or datetime.utcnow()
    stale = PaymentSession.query.filter(
        PaymentSession.status == "open",
        PaymentSession.expires_at < now,
    ).all()
    for session in stale:
        session.status = "expired"
        PAYMENT_SESSIONS.labels("expired").inc()
        logger.info("Payment session %s expired", session.reference_id)
    return len(stale)


def unsettled_sessions(room_id=None):
    """Sessions the payer walked away from; candidates for a provider status check."""
    q = PaymentSession.query.filter(PaymentSession.status.in_(("abandoned", "expired")))
    if room_id is not None:
        q = q.filter(PaymentSession.room_id == room_id)
    return q.order_by(PaymentSession.id.asc()).all()
