from flask import request
from app.schemas.room import AddressRequest
from app.services import addresses as address_svc
from app.services.rooms import get_room, require_member
from app.utils import ok, role_required, transactional, validate_schema, current_member
from . import groups_bp


@groups_bp.route("/<int:room_id>/addresses", methods=["GET"])
def list_addresses(room_id):
    room = get_room(room_id)
    require_member(room, current_member())
    return ok({
        "deliveryMode": room.delivery_mode,
        "addresses": [a.to_dict() for a in address_svc.room_addresses(room)],
        "problems": address_svc.address_problems(room),
    })


@groups_bp.route("/<int:room_id>/addresses", methods=["POST"])
@role_required(["member:manage_address", "admin"])
@validate_schema(AddressRequest)
def save_address(room_id):
    data: AddressRequest = request.validated_data
    member = current_member()
    fields = data.model_dump(exclude={"is_primary", "member_id"}, exclude_unset=True)
    with transactional("Failed to save address"):
        room = get_room(room_id, for_update=True)
        require_member(room, member)
        addr = address_svc.save_address(
            room,
            member_id=None if data.is_primary else (data.member_id or member.id),
            is_primary=data.is_primary,
            **fields,
        )
    return ok(addr.to_dict(), message="Delivery address saved")
