from flask import jsonify


def ok(data=None, message="success", status=200):
    payload = {"status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def error(message, status=400, code=None, details=None):
    """Error envelope; ``code`` is the HTTP status unless a domain error name is given."""
    payload = {
        "status": "error",
        "message": message,
        "code": code or status,
    }
    if details is not None:
        payload["details"] = details
    return jsonify(payload), status


def validation_error_response(errors):
    return error("Invalid request", status=422, details=errors)
