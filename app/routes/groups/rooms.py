from flask import request
from app.schemas.room import CreateRoomRequest, DeliveryModeRequest
from app.services import rooms as room_svc
from app.services.release_gate import refresh_state
from app.utils import ok, transactional, validate_schema, current_member
from . import groups_bp


@groups_bp.route("", methods=["POST"])
@validate_schema(CreateRoomRequest)
def create_room():
    data: CreateRoomRequest = request.validated_data
    with transactional("Failed to create room"):
        room = room_svc.create_room(current_member(), data.name, data.delivery_mode)
    return ok(room.to_dict(), message="Room created", status=201)


@groups_bp.route("/<int:room_id>", methods=["GET"])
def get_room(room_id):
    room = room_svc.get_room(room_id)
    room_svc.require_member(room, current_member())
    data = room.to_dict()
    data["memberIds"] = room_svc.member_ids(room)
    return ok(data)


@groups_bp.route("/<int:room_id>/join", methods=["POST"])
def join_room(room_id):
    with transactional("Failed to join room"):
        room = room_svc.get_room(room_id, for_update=True)
        joined = room_svc.join_room(room, current_member())
    return ok({"joined": joined, "room": room.to_dict()})


@groups_bp.route("/<int:room_id>/delivery-mode", methods=["POST"])
@validate_schema(DeliveryModeRequest)
def set_delivery_mode(room_id):
    data: DeliveryModeRequest = request.validated_data
    with transactional("Failed to set delivery mode"):
        room = room_svc.get_room(room_id, for_update=True)
        room_svc.require_member(room, current_member())
        room_svc.set_delivery_mode(room, data.delivery_mode)
        refresh_state(room)
    return ok(room.to_dict())
