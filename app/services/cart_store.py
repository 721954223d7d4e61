from flask import current_app

from models import db
from models.cart import RoomCartItem
from models.contribution import Contribution, PaymentSession
from app.services.errors import ValidationError, NotFound, RoomClosed


def live_items(room_id: int):
    """Cart items of a room that have not been checked out yet."""
    return (
        RoomCartItem.query.filter_by(room_id=room_id, order_id=None)
        .order_by(RoomCartItem.id.asc())
        .all()
    )


class RoomCartStore:
    """Persisted group cart scoped to one shopping room.

    Writes do not commit and mark the room's ledger version so clients
    following the room see the change.
    """

    def __init__(self, room):
        self.room = room

    @property
    def max_quantity(self):
        return current_app.config.get("MAX_CART_QUANTITY", 10)

    def _ensure_open(self):
        if self.room.is_placed:
            raise RoomClosed("Order already placed for this room")

    def _validate_quantity(self, quantity):
        if not isinstance(quantity, int) or quantity < 1 or quantity > self.max_quantity:
            raise ValidationError(f"Quantity must be between 1 and {self.max_quantity}")

    def items(self):
        return live_items(self.room.id)

    def get(self, item_id):
        item = RoomCartItem.query.filter_by(id=item_id, room_id=self.room.id, order_id=None).first()
        if not item:
            raise NotFound("Item not found in room cart")
        return item

    def add(self, member, *, product_id, name, unit_price, quantity=1):
        self._ensure_open()
        self._validate_quantity(quantity)
        if unit_price is None or int(unit_price) < 0:
            raise ValidationError("Unit price must be zero or more")
        item = RoomCartItem.query.filter_by(room_id=self.room.id, product_id=product_id, order_id=None).first()
        if item:
            new_quantity = item.quantity + quantity
            if new_quantity > self.max_quantity:
                raise ValidationError(f"Max limit is {self.max_quantity} units")
            item.quantity = new_quantity
        else:
            item = RoomCartItem(
                room_id=self.room.id,
                product_id=product_id,
                name=name,
                unit_price=int(unit_price),
                quantity=quantity,
                added_by=member.id,
            )
            db.session.add(item)
        db.session.flush()
        self.room.bump_version()
        return item

    def update_quantity(self, item_id, quantity):
        self._ensure_open()
        self._validate_quantity(quantity)
        item = self.get(item_id)
        item.quantity = quantity
        self.room.bump_version()
        return item

    def remove(self, item_id):
        self._ensure_open()
        item = self.get(item_id)
        if Contribution.query.filter_by(cart_item_id=item.id).first():
            raise ValidationError("Item already has contributions and cannot be removed")
        PaymentSession.query.filter_by(cart_item_id=item.id).update(
            {"cart_item_id": None}, synchronize_session="fetch"
        )
        db.session.delete(item)
        self.room.bump_version()

    def clear(self, order_id):
        """Check out every live item into ``order_id``."""
        for item in self.items():
            item.order_id = order_id
        self.room.bump_version()
