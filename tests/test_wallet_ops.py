import pytest

from models import db
from models.wallet import MemberWallet, WalletTransaction
from app.services.errors import InsufficientFunds
from app.services.wallet_ops import adjust_member_balance, get_balance


def test_credit_and_debit(make_member):
    m = make_member("9500000001")
    assert get_balance(m.id) == 0
    assert adjust_member_balance(m.id, 10000, reference="t1", type="recharge") == 10000
    assert adjust_member_balance(m.id, -3000, reference="t2", type="debit") == 7000
    db.session.commit()
    assert MemberWallet.query.filter_by(member_id=m.id).one().balance == 7000
    assert [t.amount for t in WalletTransaction.query.order_by(WalletTransaction.id)] == [10000, 3000]


def test_overdraw_is_refused(make_member):
    m = make_member("9500000002")
    adjust_member_balance(m.id, 1000, reference="t1", type="recharge")
    db.session.commit()
    with pytest.raises(InsufficientFunds):
        adjust_member_balance(m.id, -1001, reference="t2", type="debit")
    db.session.rollback()
    assert get_balance(m.id) == 1000
    assert WalletTransaction.query.count() == 1
