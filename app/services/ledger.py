import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from models.contribution import Contribution
from app.services.cart_store import live_items
from app.services.errors import LedgerUnavailable
from app.services.funding import aggregate_cart, CartFunding

logger = logging.getLogger(__name__)


def list_contributions(room_id: int) -> List[Contribution]:
    """All contributions recorded against a room's cart, oldest first."""
    try:
        return (
            Contribution.query.filter_by(room_id=room_id)
            .order_by(Contribution.id.asc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("Contribution fetch failed for room %s: %s", room_id, e)
        raise LedgerUnavailable("Could not load contributions, please retry") from e


def contributions_for_item(contributions, item_id: int) -> List[Contribution]:
    return [c for c in contributions if c.cart_item_id == item_id]


def load_room_funding(room, *, tolerate_failure=False) -> CartFunding:
    """Aggregate the live cart of ``room`` against its ledger.

    With ``tolerate_failure`` a ledger outage is logged and the cart is
    reported as unfunded instead of raising.
    """
    items = live_items(room.id)
    try:
        contributions = list_contributions(room.id)
    except LedgerUnavailable:
        if not tolerate_failure:
            raise
        logger.warning("Ledger unavailable for room %s; reporting cart as unfunded", room.id)
        funding = aggregate_cart(items, [])
        funding.stale = True
        return funding
    return aggregate_cart(items, contributions)
