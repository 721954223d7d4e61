from models import db, BIGINT
from datetime import datetime


class RoomCartItem(db.Model):
    __tablename__ = "room_cart_item"

    id = db.Column(BIGINT, primary_key=True)
    room_id = db.Column(BIGINT, db.ForeignKey("shopping_room.id"), nullable=False, index=True)
    product_id = db.Column(BIGINT, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    unit_price = db.Column(db.BigInteger, nullable=False)  # paise
    quantity = db.Column(db.Integer, nullable=False, default=1)
    added_by = db.Column(BIGINT, db.ForeignKey("member.id"), nullable=False)
    order_id = db.Column(BIGINT, nullable=True)  # set when the room order is placed
    added_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def target_amount(self):
        return int(self.unit_price) * int(self.quantity or 0)

    def to_dict(self):
        return {
            "id": self.id,
            "room_id": self.room_id,
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": int(self.unit_price),
            "quantity": self.quantity,
            "target_amount": self.target_amount,
            "added_by": self.added_by,
        }
