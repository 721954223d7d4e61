import pytest

from models import db
from models.contribution import Contribution
from models.order import GroupOrder, OrderStatusLog
from app.services import release_gate
from app.services.addresses import save_address, address_problems
from app.services.cart_store import live_items
from app.services.dispatcher import submit_contribution
from app.services.errors import OrderCreationError, RoomClosed, ValidationError
from app.utils import transactional

ADDRESS = dict(full_name="Alice", phone="9000000001", address_line1="4B Palm Court",
               city="Pune", state="MH", pincode="411001")


@pytest.fixture
def funded_room(make_member, make_room, add_item):
    alice = make_member("9000000001", "Alice")
    bob = make_member("9000000002", "Bob")
    room = make_room(alice, bob)
    rice = add_item(room, alice, unit_price=30000, name="Rice")
    oil = add_item(room, bob, unit_price=70000, name="Oil")
    submit_contribution(room, rice.id, 30000, "cod", alice)
    submit_contribution(room, oil.id, 50000, "cod", bob)
    submit_contribution(room, oil.id, 20000, "cod", alice)
    db.session.commit()
    return room, alice, bob


def test_room_ready_once_every_item_funded(funded_room):
    room, _, _ = funded_room
    assert room.status == release_gate.READY_TO_ORDER


def test_adding_item_falls_back_to_funding(funded_room, add_item):
    room, alice, _ = funded_room
    add_item(room, alice, unit_price=100, name="Salt")
    release_gate.refresh_state(room)
    assert room.status == release_gate.FUNDING


def test_missing_pincode_blocks_placement(funded_room):
    room, alice, _ = funded_room
    save_address(room, is_primary=True, **{**ADDRESS, "pincode": ""})
    db.session.commit()
    with pytest.raises(ValidationError) as exc:
        with transactional("Order placement failed"):
            release_gate.place_order(room, alice)
    assert exc.value.message == "Delivery address incomplete"
    assert exc.value.details["addressProblems"] == [{"slot": "primary", "missing": ["pincode"]}]
    assert room.status == release_gate.READY_TO_ORDER
    assert GroupOrder.query.count() == 0


def test_order_creation_failure_keeps_cart_and_ledger(funded_room, monkeypatch):
    room, alice, _ = funded_room
    save_address(room, is_primary=True, **ADDRESS)
    db.session.commit()

    def _fail(*args, **kwargs):
        raise OrderCreationError("Could not create the order, please retry")

    monkeypatch.setattr(release_gate, "create_group_order", _fail)
    with pytest.raises(OrderCreationError):
        with transactional("Order placement failed"):
            release_gate.place_order(room, alice)
    assert room.status == release_gate.READY_TO_ORDER
    assert room.placed_order_id is None
    assert len(live_items(room.id)) == 2
    assert Contribution.query.filter_by(room_id=room.id).count() == 3


def test_place_order_success(funded_room, app):
    room, alice, bob = funded_room
    save_address(room, is_primary=True, **ADDRESS)
    with transactional():
        order = release_gate.place_order(room, bob)
    assert room.status == release_gate.PLACED
    assert room.placed_order_id == order.id
    assert live_items(room.id) == []
    assert order.items_total == 100000
    assert order.delivery_fee == app.config["DELIVERY_FEE"]
    assert order.total_amount == 100000 + app.config["DELIVERY_FEE"]
    summary = order.payment_summary
    assert summary["byMethod"] == {"cod": 100000}
    assert summary["byContributor"] == {str(alice.id): 50000, str(bob.id): 50000}
    assert summary["deliveryFeeShares"] == [2500, 2500]
    assert order.delivery_addresses[0]["pincode"] == "411001"
    assert {i.name for i in order.items} == {"Rice", "Oil"}
    assert OrderStatusLog.query.filter_by(order_id=order.id).count() == 1

    with pytest.raises(RoomClosed):
        release_gate.place_order(room, alice)


def test_per_member_mode_needs_every_address(funded_room):
    room, alice, bob = funded_room
    room.delivery_mode = "per_member"
    save_address(room, member_id=alice.id, **ADDRESS)
    db.session.commit()
    assert address_problems(room) == [
        {"slot": f"member:{bob.id}", "missing": list(ADDRESS.keys())}
    ]
    with pytest.raises(ValidationError):
        release_gate.place_order(room, alice)
    db.session.rollback()

    save_address(room, member_id=bob.id, **{**ADDRESS, "full_name": "Bob"})
    order = release_gate.place_order(room, alice)
    db.session.commit()
    assert len(order.delivery_addresses) == 2


def test_unfunded_items_block_placement(make_member, make_room, add_item):
    alice = make_member("9000000021")
    room = make_room(alice)
    item = add_item(room, alice, unit_price=5000)
    submit_contribution(room, item.id, 1000, "cod", alice)
    with pytest.raises(ValidationError) as exc:
        release_gate.place_order(room, alice)
    assert exc.value.details == {"unfundedItems": [item.id]}


def test_empty_cart_blocks_placement(make_member, make_room):
    alice = make_member("9000000031")
    room = make_room(alice)
    with pytest.raises(ValidationError) as exc:
        release_gate.place_order(room, alice)
    assert exc.value.message == "Cart is empty"


def test_gate_status_reports_blockers(funded_room):
    room, _, _ = funded_room
    status = release_gate.gate_status(room)
    assert status["state"] == "ready_to_order"
    assert status["funding"]["allItemsFunded"] is True
    assert status["canPlaceOrder"] is False
    assert status["addressProblems"][0]["slot"] == "primary"

    save_address(room, is_primary=True, **ADDRESS)
    assert release_gate.gate_status(room)["canPlaceOrder"] is True


def test_order_notification_waits_for_commit(funded_room, monkeypatch):
    import app.tasks as tasks
    from app.tasks.notifications import notify_order_placed_task

    room, alice, _ = funded_room
    save_address(room, is_primary=True, **ADDRESS)
    db.session.commit()
    sent = []
    monkeypatch.setattr(tasks, "dispatch", lambda task, *args: sent.append((task.name, args)))

    release_gate.place_order(room, alice)
    assert sent == []
    db.session.rollback()
    assert sent == []
    assert room.status == release_gate.READY_TO_ORDER

    with transactional():
        order = release_gate.place_order(room, alice)
    assert sent == [(notify_order_placed_task.name, (order.id,))]
