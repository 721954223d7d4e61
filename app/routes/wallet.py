from flask import Blueprint, request
from app.version import API_PREFIX
from models.wallet import WalletTransaction
from app.schemas.room import WalletLoadRequest
from app.services.money import display
from app.services.wallet_ops import adjust_member_balance, get_balance
from app.utils import ok, auth_required, role_required, transactional, validate_schema, current_member

wallet_bp = Blueprint("wallet", __name__, url_prefix=f"{API_PREFIX}/wallet")


@wallet_bp.before_request
@auth_required
@role_required(["member", "admin"])
def _enforce_member_role():
    return None


@wallet_bp.route("", methods=["GET"])
def get_wallet():
    balance = get_balance(current_member().id)
    return ok({"balance": balance, "balanceDisplay": display(balance)})


@wallet_bp.route("/history", methods=["GET"])
def wallet_history():
    txns = (
        WalletTransaction.query.filter_by(member_id=current_member().id)
        .order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc())
        .limit(50)
        .all()
    )
    return ok({"transactions": [t.to_dict() for t in txns]})


@wallet_bp.route("/load", methods=["POST"])
@role_required(["member:wallet_load", "admin"])
@validate_schema(WalletLoadRequest)
def load_wallet():
    data: WalletLoadRequest = request.validated_data
    with transactional("Failed to load wallet"):
        balance = adjust_member_balance(
            current_member().id,
            data.amount,
            reference=data.reference or "manual-load",
            type="recharge",
            source="api",
        )
    return ok({"balance": balance, "balanceDisplay": display(balance)}, message="Wallet loaded")
