from models import db
from models.room import ShoppingRoom, RoomMember
from app.services.errors import NotFound, Forbidden, RoomClosed, ValidationError

DELIVERY_MODES = ("single", "per_member")


def get_room(room_id, *, for_update=False) -> ShoppingRoom:
    q = ShoppingRoom.query.filter_by(id=room_id)
    if for_update:
        q = q.with_for_update()
    room = q.first()
    if not room:
        raise NotFound("Room not found")
    return room


def is_member(room, member_id) -> bool:
    return RoomMember.query.filter_by(room_id=room.id, member_id=member_id).first() is not None


def require_member(room, member):
    if not is_member(room, member.id):
        raise Forbidden("Not a member of this room")


def member_ids(room):
    return [m.member_id for m in RoomMember.query.filter_by(room_id=room.id).order_by(RoomMember.id.asc())]


def create_room(creator, name, delivery_mode="single") -> ShoppingRoom:
    if delivery_mode not in DELIVERY_MODES:
        raise ValidationError("Invalid delivery mode")
    room = ShoppingRoom(name=name, creator_id=creator.id, member_count=1, delivery_mode=delivery_mode)
    db.session.add(room)
    db.session.flush()
    db.session.add(RoomMember(room_id=room.id, member_id=creator.id))
    return room


def join_room(room, member) -> bool:
    """Add ``member`` to ``room``; returns False if already a member."""
    if room.is_placed:
        raise RoomClosed("Order already placed for this room")
    if is_member(room, member.id):
        return False
    db.session.add(RoomMember(room_id=room.id, member_id=member.id))
    room.member_count = (room.member_count or 0) + 1
    room.bump_version()
    return True


def set_delivery_mode(room, mode):
    if room.is_placed:
        raise RoomClosed("Order already placed for this room")
    if mode not in DELIVERY_MODES:
        raise ValidationError("Invalid delivery mode")
    room.delivery_mode = mode
    room.bump_version()
