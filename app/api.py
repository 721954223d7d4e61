from app.routes import (
    auth_bp,
    groups_bp,
    room_cart_bp,
    payments_bp,
    wallet_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(groups_bp)
    app.register_blueprint(room_cart_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(wallet_bp)
