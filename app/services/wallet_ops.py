from models.wallet import MemberWallet, WalletTransaction
from models import db
from app.services.errors import InsufficientFunds


def get_balance(member_id: int) -> int:
    wallet = MemberWallet.query.filter_by(member_id=member_id).first()
    return int(wallet.balance) if wallet else 0


def adjust_member_balance(member_id: int, delta: int, *, reference: str, type: str, source: str = None, status: str = "success"):
    """
    Atomically adjust a member wallet by ``delta`` paise.
    Creates a WalletTransaction row in the same DB transaction.
    Prevents negative balances. Returns the new balance.
    Does NOT commit; caller is responsible for commit/rollback.
    """
    amount = int(delta)
    wallet = MemberWallet.query.filter_by(member_id=member_id).with_for_update(of=MemberWallet).first()
    if not wallet:
        wallet = MemberWallet(member_id=member_id, balance=0)
        db.session.add(wallet)
        db.session.flush()

    new_balance = int(wallet.balance or 0) + amount
    if new_balance < 0:
        raise InsufficientFunds("Insufficient wallet balance")

    wallet.balance = new_balance

    txn = WalletTransaction(
        member_id=member_id,
        amount=abs(amount),
        type=type,
        reference=reference,
        status=status,
        source=source
    )
    db.session.add(txn)
    return new_balance
