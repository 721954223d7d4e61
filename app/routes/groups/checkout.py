from flask import current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from app.services import release_gate
from app.services.rooms import get_room, require_member
from app.utils import ok, role_required, transactional, current_member
from . import groups_bp


@groups_bp.route("/<int:room_id>/status", methods=["GET"])
def room_status(room_id):
    room = get_room(room_id)
    require_member(room, current_member())
    return ok(release_gate.gate_status(room))


def place_room_order(room_id):
    with transactional("Order placement failed"):
        room = get_room(room_id, for_update=True)
        order = release_gate.place_order(room, current_member())
    return ok({"order": order.to_dict(), "state": room.status}, message="Order placed successfully", status=201)


@groups_bp.route("/<int:room_id>/place-order", methods=["POST"])
@role_required(["member:place_order", "admin"])
@limiter.limit(
    lambda: current_app.config["ORDER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
def place_order(room_id):
    return place_room_order(room_id)
