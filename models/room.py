from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from models import db, BIGINT


class ShoppingRoom(db.Model):
    __tablename__ = "shopping_room"

    id = Column(BIGINT, primary_key=True)
    name = Column(String(100), nullable=False)
    creator_id = Column(BIGINT, ForeignKey("member.id"), nullable=False)
    member_count = Column(Integer, nullable=False, default=1)
    delivery_mode = Column(String(20), nullable=False, default="single")  # single, per_member
    status = Column(String(20), nullable=False, default="funding")  # funding, ready_to_order, placed
    ledger_version = Column(Integer, nullable=False, default=0)
    placed_order_id = Column(BIGINT, nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    members = db.relationship("RoomMember", backref="room", cascade="all, delete-orphan", lazy=True)

    @property
    def is_placed(self):
        return self.status == "placed"

    @property
    def is_single_recipient(self):
        return self.member_count == 1 or self.delivery_mode == "single"

    def bump_version(self):
        self.ledger_version = (self.ledger_version or 0) + 1

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "creator_id": self.creator_id,
            "member_count": self.member_count,
            "delivery_mode": self.delivery_mode,
            "status": self.status,
            "ledger_version": self.ledger_version,
            "placed_order_id": self.placed_order_id,
        }


class RoomMember(db.Model):
    __tablename__ = "room_member"
    __table_args__ = (
        db.UniqueConstraint("room_id", "member_id", name="uq_room_member"),
    )

    id = Column(BIGINT, primary_key=True)
    room_id = Column(BIGINT, ForeignKey("shopping_room.id"), nullable=False)
    member_id = Column(BIGINT, ForeignKey("member.id"), nullable=False)
    joined_at = Column(DateTime, default=func.now())

    member = db.relationship("Member")
