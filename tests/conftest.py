import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db
from models.member import Member


@pytest.fixture(scope='session')
def app_instance():
    os.environ.setdefault('APP_ENV', 'testing')
    os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
    from app import create_app
    app = create_app()
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI='sqlite:///:memory:',
        SQLALCHEMY_TRACK_MODIFICATIONS=False
    )
    return app


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        app_instance.extensions.pop("card_gateway", None)
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Log a member in through the test stub; returns (member_id, headers)."""
    def _login(phone, name=None, role="member"):
        r = client.post("/__auth/login_stub", json={"phone": phone, "name": name or phone, "role": role})
        data = r.get_json()["data"]
        return data["memberId"], {"Authorization": f"Bearer {data['access']}"}
    return _login


@pytest.fixture
def make_member(app):
    def _make(phone, name=None):
        member = Member(phone=phone, name=name or phone, role="member")
        db.session.add(member)
        db.session.commit()
        return member
    return _make


@pytest.fixture
def make_room(app):
    """Create a committed room with ``creator`` and any extra members."""
    from app.services import rooms

    def _make(creator, *others, delivery_mode="single", name="Flat 4B"):
        room = rooms.create_room(creator, name, delivery_mode)
        db.session.flush()
        for member in others:
            rooms.join_room(room, member)
        db.session.commit()
        return room
    return _make


@pytest.fixture
def add_item(app):
    """Add a committed live cart item; ``unit_price`` is paise."""
    from app.services.cart_store import RoomCartStore

    def _add(room, member, unit_price, quantity=1, product_id=None, name="Item"):
        item = RoomCartStore(room).add(
            member,
            product_id=product_id or (1000 + len(RoomCartStore(room).items())),
            name=name,
            unit_price=unit_price,
            quantity=quantity,
        )
        db.session.commit()
        return item
    return _add


@pytest.fixture
def fund_wallet(app):
    from app.services.wallet_ops import adjust_member_balance

    def _fund(member, amount):
        adjust_member_balance(member.id, amount, reference="seed", type="recharge", source="test")
        db.session.commit()
    return _fund


class FakeCardGateway:
    def __init__(self, outcome="succeeded"):
        self.outcome = outcome
        self.calls = []

    def charge(self, *, token, amount, reference):
        from app.services.errors import GatewayError, NetworkError
        self.calls.append({"token": token, "amount": amount, "reference": reference})
        if self.outcome == "network":
            raise NetworkError("Payment gateway unreachable, please retry")
        if self.outcome == "declined":
            raise GatewayError("Card payment declined: insufficient_funds")
        return f"ch_{len(self.calls)}"


@pytest.fixture
def card_gateway(app):
    gw = FakeCardGateway()
    app.extensions["card_gateway"] = gw
    yield gw
    app.extensions.pop("card_gateway", None)
