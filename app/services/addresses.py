from models import db
from models.address import DeliveryAddress, REQUIRED_ADDRESS_FIELDS
from app.services.errors import RoomClosed, ValidationError
from app.services.rooms import member_ids, is_member

ADDRESS_FIELDS = REQUIRED_ADDRESS_FIELDS + ("address_line2",)


def room_addresses(room):
    return DeliveryAddress.query.filter_by(room_id=room.id).order_by(DeliveryAddress.id.asc()).all()


def primary_address(room):
    return DeliveryAddress.query.filter_by(room_id=room.id, is_primary=True).first()


def save_address(room, *, member_id=None, is_primary=False, **fields):
    """Create or replace the primary address or a member's address for a room.

    Incomplete addresses are stored; completeness is checked when the order
    is placed.
    """
    if room.is_placed:
        raise RoomClosed("Order already placed for this room")
    if is_primary:
        member_id = None
        existing = primary_address(room)
    else:
        if member_id is None:
            raise ValidationError("member_id is required for a member address")
        if not is_member(room, member_id):
            raise ValidationError("Address member is not in this room")
        existing = DeliveryAddress.query.filter_by(room_id=room.id, member_id=member_id, is_primary=False).first()
    addr = existing or DeliveryAddress(room_id=room.id, member_id=member_id, is_primary=is_primary)
    for name in ADDRESS_FIELDS:
        if name in fields:
            value = fields[name]
            setattr(addr, name, value.strip() if isinstance(value, str) else value)
    if existing is None:
        db.session.add(addr)
    room.bump_version()
    return addr


def address_problems(room):
    """List what keeps the room's delivery addresses from being complete."""
    problems = []
    if room.delivery_mode == "single":
        addr = primary_address(room)
        if not addr:
            return [{"slot": "primary", "missing": list(REQUIRED_ADDRESS_FIELDS)}]
        missing = addr.missing_fields()
        if missing:
            problems.append({"slot": "primary", "missing": missing})
        return problems
    by_member = {
        a.member_id: a
        for a in DeliveryAddress.query.filter_by(room_id=room.id, is_primary=False).all()
    }
    for mid in member_ids(room):
        addr = by_member.get(mid)
        missing = addr.missing_fields() if addr else list(REQUIRED_ADDRESS_FIELDS)
        if missing:
            problems.append({"slot": f"member:{mid}", "missing": missing})
    return problems


def required_addresses(room):
    if room.delivery_mode == "single":
        addr = primary_address(room)
        return [addr] if addr else []
    return DeliveryAddress.query.filter_by(room_id=room.id, is_primary=False).order_by(DeliveryAddress.id.asc()).all()
