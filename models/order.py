from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, BigInteger
from sqlalchemy.sql import func
from models import db, BIGINT


class GroupOrder(db.Model):
    __tablename__ = "group_order"
    id = Column(BIGINT, primary_key=True)
    room_id = Column(BIGINT, ForeignKey("shopping_room.id"), nullable=False, unique=True)
    placed_by = Column(BIGINT, ForeignKey("member.id"), nullable=False)
    status = Column(String(30), default="placed")  # placed, dispatched, delivered, cancelled
    items_total = Column(BigInteger, nullable=False)
    delivery_fee = Column(BigInteger, nullable=False, default=0)
    total_amount = Column(BigInteger, nullable=False)
    delivery_mode = Column(String(20), nullable=False)
    payment_summary = Column(db.JSON, nullable=True)
    delivery_addresses = Column(db.JSON, nullable=True)
    created_at = Column(DateTime, default=func.now())

    items = db.relationship("GroupOrderItem", backref="order", cascade="all, delete-orphan", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "roomId": self.room_id,
            "placedBy": self.placed_by,
            "status": self.status,
            "itemsTotal": int(self.items_total),
            "deliveryFee": int(self.delivery_fee),
            "totalAmount": int(self.total_amount),
            "deliveryMode": self.delivery_mode,
            "paymentSummary": self.payment_summary,
            "deliveryAddresses": self.delivery_addresses,
            "items": [i.to_dict() for i in self.items],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class GroupOrderItem(db.Model):
    __tablename__ = "group_order_item"
    id = db.Column(BIGINT, primary_key=True)
    order_id = db.Column(BIGINT, db.ForeignKey("group_order.id"), nullable=False)
    cart_item_id = db.Column(BIGINT, nullable=False)
    product_id = db.Column(BIGINT, nullable=False)
    name = db.Column(db.String(255))
    unit_price = db.Column(db.BigInteger)
    quantity = db.Column(db.Integer)
    subtotal = db.Column(db.BigInteger)
    funded_amount = db.Column(db.BigInteger)

    def to_dict(self):
        return {
            "cartItemId": self.cart_item_id,
            "productId": self.product_id,
            "name": self.name,
            "unitPrice": int(self.unit_price),
            "quantity": self.quantity,
            "subtotal": int(self.subtotal),
            "fundedAmount": int(self.funded_amount or 0),
        }


class OrderStatusLog(db.Model):
    __tablename__ = "order_status_log"
    id = Column(BIGINT, primary_key=True)
    order_id = Column(BIGINT, ForeignKey("group_order.id"), nullable=False)
    status = Column(String(30), nullable=False)
    updated_by = Column(BIGINT, nullable=False)
    details = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=func.now())
