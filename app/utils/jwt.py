import datetime as dt
from typing import Dict
import jwt
from flask import current_app

ALGORITHM = "HS256"


class TokenError(Exception):
    pass


def _encode(claims: Dict, lifetime: dt.timedelta) -> str:
    payload = dict(claims, exp=dt.datetime.now(dt.timezone.utc) + lifetime)
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=ALGORITHM)


def create_access_token(phone: str, role: str = "member") -> str:
    minutes = current_app.config["ACCESS_TOKEN_LIFETIME_MIN"]
    return _encode({"sub": phone, "role": role, "type": "access"}, dt.timedelta(minutes=minutes))


def create_refresh_token(phone: str) -> str:
    days = current_app.config["REFRESH_TOKEN_LIFETIME_DAYS"]
    return _encode({"sub": phone, "type": "refresh"}, dt.timedelta(days=days))


def decode_token(token: str, expected_type: str = "access") -> Dict:
    """Decode a member token, checking signature, expiry and token type."""
    try:
        claims = jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise TokenError("token expired")
    except jwt.InvalidTokenError:
        raise TokenError("invalid token")
    if claims.get("type") != expected_type:
        raise TokenError(f"expected {expected_type} token")
    return claims
