from sqlalchemy import Column, String, DateTime, ForeignKey, BigInteger
from sqlalchemy.sql import func
from models import db, BIGINT

PAYMENT_METHODS = ("wallet", "upi", "googlepay", "phonepe", "cod", "card")
CONTRIBUTION_STATUSES = ("pending", "contributed", "confirmed")


class Contribution(db.Model):
    __tablename__ = "contribution"
    __table_args__ = (
        db.UniqueConstraint(
            "contributor_id", "cart_item_id", "transaction_id",
            name="uq_contribution_contributor_item_txn",
        ),
        db.Index("ix_contribution_room_item", "room_id", "cart_item_id"),
    )

    id = Column(BIGINT, primary_key=True)
    room_id = Column(BIGINT, ForeignKey("shopping_room.id"), nullable=False)
    cart_item_id = Column(BIGINT, ForeignKey("room_cart_item.id"), nullable=False)
    contributor_id = Column(BIGINT, ForeignKey("member.id"), nullable=False)
    amount = Column(BigInteger, nullable=False)  # paise
    payment_method = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    transaction_id = Column(String(120), nullable=True)
    created_at = Column(DateTime, default=func.now())

    contributor = db.relationship("Member", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "roomId": self.room_id,
            "cartItemId": self.cart_item_id,
            "contributorId": self.contributor_id,
            "contributorName": self.contributor.name if self.contributor else None,
            "amount": int(self.amount),
            "paymentMethod": self.payment_method,
            "status": self.status,
            "transactionId": self.transaction_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class PaymentSession(db.Model):
    """An external UPI payment opened for a contribution but not yet settled."""

    __tablename__ = "payment_session"

    id = Column(BIGINT, primary_key=True)
    reference_id = Column(String(120), unique=True, nullable=False)
    room_id = Column(BIGINT, ForeignKey("shopping_room.id"), nullable=False)
    # Cleared when the item leaves the cart; a later success is refunded.
    cart_item_id = Column(BIGINT, ForeignKey("room_cart_item.id", ondelete="SET NULL"), nullable=True)
    contributor_id = Column(BIGINT, ForeignKey("member.id"), nullable=False)
    amount = Column(BigInteger, nullable=False)
    payment_method = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="open")  # open, succeeded, abandoned, expired, refunded
    provider_transaction_id = Column(String(120), nullable=True)
    contribution_id = Column(BIGINT, ForeignKey("contribution.id"), nullable=True)
    upi_intent = Column(String(500), nullable=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=func.now())
    settled_at = Column(DateTime, nullable=True)

    def to_dict(self):
        return {
            "referenceId": self.reference_id,
            "roomId": self.room_id,
            "itemId": self.cart_item_id,
            "userId": self.contributor_id,
            "amount": int(self.amount),
            "paymentMethod": self.payment_method,
            "status": self.status,
            "upiString": self.upi_intent,
            "expiryTime": self.expires_at.isoformat() if self.expires_at else None,
            "contributionId": self.contribution_id,
        }
