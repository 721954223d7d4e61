from .auth import auth_bp
from .groups import groups_bp
from .room_cart import room_cart_bp
from .payments import payments_bp
from .wallet import wallet_bp


__all__ = [
    'auth_bp',
    'groups_bp',
    'room_cart_bp',
    'payments_bp',
    'wallet_bp',
]
