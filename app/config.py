import os

class BaseConfig:
    JSON_SORT_KEYS = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    CONTRIBUTION_LIMIT_PER_IP = os.getenv("CONTRIBUTION_LIMIT_PER_IP", "60 per minute")
    ORDER_LIMIT_PER_IP = os.getenv("ORDER_LIMIT_PER_IP", "20 per hour")
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-insecure-jwt-key")
    ACCESS_TOKEN_LIFETIME_MIN = int(os.getenv("ACCESS_TOKEN_LIFETIME_MIN", 15))
    REFRESH_TOKEN_LIFETIME_DAYS = int(os.getenv("REFRESH_TOKEN_LIFETIME_DAYS", 30))
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "roomcart-backend")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces")

    # accept, reject or cap
    CONTRIBUTION_OVERSHOOT_POLICY = os.getenv("CONTRIBUTION_OVERSHOOT_POLICY", "accept").lower()
    # All amounts are paise
    DELIVERY_FEE = int(os.getenv("DELIVERY_FEE", 5000))
    MAX_CART_QUANTITY = int(os.getenv("MAX_CART_QUANTITY", 10))
    UPI_SESSION_TTL_HOURS = int(os.getenv("UPI_SESSION_TTL_HOURS", 24))
    UPI_PAYEE_VPA = os.getenv("UPI_PAYEE_VPA", "roomcart@icici")
    UPI_PAYEE_NAME = os.getenv("UPI_PAYEE_NAME", "RoomCart")
    CARD_GATEWAY_URL = os.getenv("CARD_GATEWAY_URL", "https://sandbox.gateway.example/v1")
    CARD_GATEWAY_KEY = os.getenv("CARD_GATEWAY_KEY", "")
    CARD_GATEWAY_TIMEOUT = float(os.getenv("CARD_GATEWAY_TIMEOUT", 10))
    LEDGER_POLL_INTERVAL = float(os.getenv("LEDGER_POLL_INTERVAL", 2))
    LEDGER_LONGPOLL_MAX_WAIT = float(os.getenv("LEDGER_LONGPOLL_MAX_WAIT", 25))
    # HMAC-SHA256 key for provider callbacks; unsigned callbacks are refused when set
    UPI_WEBHOOK_SECRET = os.getenv("UPI_WEBHOOK_SECRET", "")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dev.db")

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    RATELIMIT_ENABLED = False
    LEDGER_POLL_INTERVAL = 0.01
    LEDGER_LONGPOLL_MAX_WAIT = 0.2
    UPI_WEBHOOK_SECRET = "test-webhook-secret"

class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")

    @staticmethod
    def validate():
        missing = []
        for name in ("SECRET_KEY", "DATABASE_URL", "JWT_SECRET", "CARD_GATEWAY_KEY", "UPI_WEBHOOK_SECRET"):
            if not os.getenv(name):
                missing.append(name)
        if os.getenv("CONTRIBUTION_OVERSHOOT_POLICY", "accept").lower() not in ("accept", "reject", "cap"):
            missing.append("CONTRIBUTION_OVERSHOOT_POLICY (accept|reject|cap)")
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )

def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
