from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()

# Re-export common models for convenience
from .member import Member  # noqa: F401
from .room import ShoppingRoom, RoomMember  # noqa: F401
from .cart import RoomCartItem  # noqa: F401
from .contribution import Contribution, PaymentSession  # noqa: F401
from .address import DeliveryAddress  # noqa: F401
from .wallet import MemberWallet, WalletTransaction  # noqa: F401
from .order import GroupOrder, GroupOrderItem, OrderStatusLog  # noqa: F401
