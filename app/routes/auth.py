from flask import Blueprint, request, current_app
from app.version import API_PREFIX
from models.member import Member
from app.utils import ok, error, auth_required, current_member
from app.utils.jwt import create_access_token, create_refresh_token, decode_token, TokenError

auth_bp = Blueprint("auth", __name__, url_prefix=API_PREFIX)


@auth_bp.route("/auth/refresh", methods=["POST"])
def refresh_tokens():
    j = request.get_json(silent=True) or {}
    token = j.get("refresh_token", "")
    try:
        payload = decode_token(token, expected_type="refresh")
    except TokenError as e:
        return error(str(e), status=401)

    phone = payload.get("sub")
    member = Member.query.filter_by(phone=phone).first()
    if not member:
        return error("Unknown member", status=401)
    return ok({
        "access_token": create_access_token(phone, member.role),
        "refresh_token": create_refresh_token(phone),
        "expires_in": current_app.config["ACCESS_TOKEN_LIFETIME_MIN"] * 60,
    })


@auth_bp.route("/me", methods=["GET"])
@auth_required
def whoami():
    return ok(current_member().to_dict())
