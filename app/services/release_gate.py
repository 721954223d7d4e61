"""Order release gate: funding -> ready_to_order -> placed.

``funding -> ready_to_order`` needs every live cart item fully funded.
``ready_to_order -> placed`` additionally needs complete delivery
addresses and a successful order creation. Any error is raised before the
caller commits, so a failed placement leaves room, cart and ledger as they
were.
"""
import logging

from app.metrics import ORDERS_PLACED
from app.services import addresses as address_svc
from app.services.cart_store import RoomCartStore, live_items
from app.services.errors import RoomClosed, ValidationError
from app.services.funding import aggregate_cart
from app.services.ledger import list_contributions
from app.services.order_service import create_group_order
from app.services.rooms import require_member
from app.tasks import dispatch_after_commit
from app.tasks.notifications import notify_room_funded_task, notify_order_placed_task

logger = logging.getLogger(__name__)

FUNDING = "funding"
READY_TO_ORDER = "ready_to_order"
PLACED = "placed"


def refresh_state(room, funding=None):
    """Re-derive the room state from its funding; never touches ``placed``."""
    if room.status == PLACED:
        return room.status
    if funding is None:
        funding = aggregate_cart(live_items(room.id), list_contributions(room.id))
    new_status = READY_TO_ORDER if funding.can_proceed else FUNDING
    if new_status != room.status:
        logger.info("Room %s moved %s -> %s", room.id, room.status, new_status)
        room.status = new_status
        if new_status == READY_TO_ORDER:
            dispatch_after_commit(notify_room_funded_task, room.id)
    return room.status


def gate_status(room):
    funding = aggregate_cart(live_items(room.id), list_contributions(room.id))
    problems = [] if room.status == PLACED else address_svc.address_problems(room)
    return {
        "state": room.status,
        "funding": funding.to_dict(),
        "addressProblems": problems,
        "canPlaceOrder": room.status != PLACED and funding.can_proceed and not problems,
        "placedOrderId": room.placed_order_id,
    }


def place_order(room, actor):
    """Place the group order for ``room``. Does NOT commit."""
    if room.status == PLACED:
        raise RoomClosed("Order already placed for this room")
    require_member(room, actor)

    items = live_items(room.id)
    contributions = list_contributions(room.id)
    funding = aggregate_cart(items, contributions)
    if not items:
        raise ValidationError("Cart is empty")
    if not funding.all_items_funded:
        unfunded = [t.item_id for t in funding.targets if not t.is_complete]
        raise ValidationError("Not all items are fully funded", details={"unfundedItems": unfunded})
    refresh_state(room, funding)

    problems = address_svc.address_problems(room)
    if problems:
        raise ValidationError("Delivery address incomplete", details={"addressProblems": problems})

    order = create_group_order(
        room, actor, items, funding, address_svc.required_addresses(room), contributions
    )

    # Only reached once the order exists.
    RoomCartStore(room).clear(order.id)
    room.status = PLACED
    room.placed_order_id = order.id
    ORDERS_PLACED.inc()
    logger.info("Room %s placed order %s", room.id, order.id)
    dispatch_after_commit(notify_order_placed_task, order.id)
    return order
