from functools import wraps
from flask import request, g
from .responses import error
from app.auth.permissions import role_has_scope
from .jwt import decode_token, TokenError
from models.member import Member


def current_member():
    return getattr(g, "member", None)


def _bearer_token():
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header.split(" ", 1)[1]
    return header


def auth_required(func):
    """Resolve the access token to a ``Member`` on ``g.member``."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return error("Auth header missing", status=401)
        try:
            claims = decode_token(token, expected_type="access")
        except TokenError as e:
            return error(str(e), status=401)

        member = Member.query.filter_by(phone=claims["sub"]).first()
        if member is None:
            return error("Unknown member", status=401)
        g.member = member
        g.role = member.role or claims.get("role")
        return func(*args, **kwargs)

    return wrapper


def _allows(role, entry):
    """``entry`` is a bare role or ``role:action`` checked against the scope registry."""
    if ":" not in entry:
        return role == entry
    wanted, action = entry.split(":", 1)
    return role == wanted and role_has_scope(role, action)


def role_required(required):
    """Authorize the current member by role or scoped action."""
    entries = list(required) if isinstance(required, (list, tuple, set)) else [required]

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = getattr(g, "role", None)
            if not role:
                return error("Role missing", status=403)
            if not any(_allows(role, entry) for entry in entries):
                return error("Forbidden", status=403)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
