from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os

# Global limiter; contribution and order endpoints add their own per-IP limits
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATELIMIT_STORAGE_URL", "memory://"),
    strategy="fixed-window",
    default_limits=[os.getenv("RATELIMIT_DEFAULT", "1000 per hour")],
)
