from .responses import ok, error, validation_error_response
from .auth import auth_required, role_required, current_member
from .validation import validate_schema, validate_query
from .db import transactional
from .jwt import (
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'auth_required',
    'role_required',
    'current_member',
    'create_access_token',
    'create_refresh_token',
    'decode_token',
    'TokenError',
    'validate_schema',
    'validate_query',
    'transactional',
]
