from flask import Blueprint
from app.version import API_PREFIX
from app.utils import auth_required, role_required

groups_bp = Blueprint("groups", __name__, url_prefix=f"{API_PREFIX}/groups")


@groups_bp.before_request
@auth_required
@role_required(["member", "admin"])
def _enforce_member_role():
    """Ensure the requester is an authenticated member."""
    return None

from . import rooms  # noqa: E402
from . import contributions  # noqa: E402
from . import addresses  # noqa: E402
from . import checkout  # noqa: E402
