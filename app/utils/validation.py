from functools import wraps
from flask import request
from pydantic import ValidationError
from .responses import validation_error_response


def _validated(schema, source):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                obj = schema.model_validate(source())
            except ValidationError as ve:
                return validation_error_response(
                    ve.errors(include_url=False, include_context=False, include_input=False)
                )
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def validate_schema(schema):
    """Decorator to validate request JSON against a Pydantic schema."""
    return _validated(schema, lambda: request.get_json(silent=True) or {})


def validate_query(schema):
    """Decorator to validate the query string against a Pydantic schema."""
    return _validated(schema, lambda: request.args.to_dict())
