from models import db, BIGINT
from datetime import datetime

REQUIRED_ADDRESS_FIELDS = ("full_name", "phone", "address_line1", "city", "state", "pincode")


class DeliveryAddress(db.Model):
    __tablename__ = "delivery_address"
    __table_args__ = (
        db.UniqueConstraint("room_id", "member_id", "is_primary", name="uq_delivery_address_slot"),
    )

    id = db.Column(BIGINT, primary_key=True)
    room_id = db.Column(BIGINT, db.ForeignKey("shopping_room.id"), nullable=False)
    member_id = db.Column(BIGINT, db.ForeignKey("member.id"), nullable=True)  # NULL for the primary address
    is_primary = db.Column(db.Boolean, default=False, nullable=False)
    full_name = db.Column(db.String(100))
    phone = db.Column(db.String(20))
    address_line1 = db.Column(db.String(255))
    address_line2 = db.Column(db.String(255))
    city = db.Column(db.String(100))
    state = db.Column(db.String(100))
    pincode = db.Column(db.String(10))
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def missing_fields(self):
        return [f for f in REQUIRED_ADDRESS_FIELDS if not (getattr(self, f) or "").strip()]

    @property
    def is_complete(self):
        return not self.missing_fields()

    def to_dict(self):
        return {
            "id": self.id,
            "memberId": self.member_id,
            "isPrimary": self.is_primary,
            "fullName": self.full_name,
            "phone": self.phone,
            "addressLine1": self.address_line1,
            "addressLine2": self.address_line2,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "isComplete": self.is_complete,
        }
