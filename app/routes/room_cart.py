from flask import Blueprint, request
from app.version import API_PREFIX
from app.schemas.room import CartAddRequest, CartUpdateRequest, CartRemoveRequest
from app.services.cart_store import RoomCartStore
from app.services.ledger import load_room_funding
from app.services.release_gate import refresh_state
from app.services.rooms import get_room, require_member
from app.utils import ok, auth_required, role_required, transactional, validate_schema, current_member

room_cart_bp = Blueprint("room_cart", __name__, url_prefix=f"{API_PREFIX}/room-cart")


@room_cart_bp.before_request
@auth_required
@role_required(["member", "admin"])
def _enforce_member_role():
    return None


def _open_store(room_id, *, for_update=False):
    room = get_room(room_id, for_update=for_update)
    require_member(room, current_member())
    return room, RoomCartStore(room)


@room_cart_bp.route("/<int:room_id>", methods=["GET"])
def view_room_cart(room_id):
    room, store = _open_store(room_id)
    funding = load_room_funding(room, tolerate_failure=True)
    return ok({
        "roomId": room.id,
        "state": room.status,
        "version": room.ledger_version,
        "items": [i.to_dict() for i in store.items()],
        "totalCartValue": funding.total_cart_value,
    })


@room_cart_bp.route("/add", methods=["POST"])
@role_required(["member:manage_cart", "admin"])
@validate_schema(CartAddRequest)
def add_to_room_cart():
    data: CartAddRequest = request.validated_data
    with transactional("Failed to add item to room cart"):
        room, store = _open_store(data.room_id, for_update=True)
        item = store.add(
            current_member(),
            product_id=data.product_id,
            name=data.name,
            unit_price=data.unit_price,
            quantity=data.quantity,
        )
        refresh_state(room)
    return ok(item.to_dict(), message="Item added to room cart", status=201)


@room_cart_bp.route("/update", methods=["POST"])
@role_required(["member:manage_cart", "admin"])
@validate_schema(CartUpdateRequest)
def update_room_cart():
    data: CartUpdateRequest = request.validated_data
    with transactional("Failed to update room cart"):
        room, store = _open_store(data.room_id, for_update=True)
        item = store.update_quantity(data.cart_item_id, data.quantity)
        refresh_state(room)
    return ok(item.to_dict(), message="Cart updated")


@room_cart_bp.route("/remove", methods=["POST"])
@role_required(["member:manage_cart", "admin"])
@validate_schema(CartRemoveRequest)
def remove_from_room_cart():
    data: CartRemoveRequest = request.validated_data
    with transactional("Failed to remove item from room cart"):
        room, store = _open_store(data.room_id, for_update=True)
        store.remove(data.cart_item_id)
        refresh_state(room)
    return ok({"removed": data.cart_item_id}, message="Item removed from room cart")
