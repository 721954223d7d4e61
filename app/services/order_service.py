import logging
from collections import defaultdict

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.order import GroupOrder, GroupOrderItem, OrderStatusLog
from app.services.errors import OrderCreationError
from app.services.funding import is_counted
from app.services.money import split_evenly, display

logger = logging.getLogger(__name__)


def payment_summary(contributions, member_count, delivery_fee):
    by_method = defaultdict(int)
    by_member = defaultdict(int)
    for c in contributions:
        if is_counted(c):
            by_method[c.payment_method] += int(c.amount)
            by_member[str(c.contributor_id)] += int(c.amount)
    return {
        "byMethod": dict(by_method),
        "byContributor": dict(by_member),
        "deliveryFee": delivery_fee,
        "deliveryFeeShares": split_evenly(delivery_fee, max(1, member_count or 1)),
    }


def create_group_order(room, actor, items, funding, addresses, contributions) -> GroupOrder:
    """Persist the group order for a fully funded room cart.

    Does NOT commit; the caller owns the transaction.
    """
    delivery_fee = int(current_app.config.get("DELIVERY_FEE", 0))
    items_total = funding.total_cart_value
    order = GroupOrder(
        room_id=room.id,
        placed_by=actor.id,
        status="placed",
        items_total=items_total,
        delivery_fee=delivery_fee,
        total_amount=items_total + delivery_fee,
        delivery_mode=room.delivery_mode,
        payment_summary=payment_summary(contributions, room.member_count, delivery_fee),
        delivery_addresses=[a.to_dict() for a in addresses],
    )
    try:
        db.session.add(order)
        db.session.flush()
        for item in items:
            target = funding.target_for(item.id)
            db.session.add(
                GroupOrderItem(
                    order_id=order.id,
                    cart_item_id=item.id,
                    product_id=item.product_id,
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    subtotal=target.target_amount,
                    funded_amount=target.current_amount,
                )
            )
        db.session.add(
            OrderStatusLog(
                order_id=order.id,
                status="placed",
                updated_by=actor.id,
                details=f"Group order placed for room {room.id}: {display(order.total_amount)}",
            )
        )
        db.session.flush()
    except SQLAlchemyError as e:
        logger.error("Group order creation failed for room %s: %s", room.id, e)
        raise OrderCreationError("Could not create the order, please retry") from e
    return order
