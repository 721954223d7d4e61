from types import SimpleNamespace

from app.services.funding import aggregate_cart, funding_progress, item_target
from app.services.money import display, split_evenly, to_minor


def _item(item_id, target, name="Item"):
    return SimpleNamespace(id=item_id, name=name, target_amount=target)


def _c(item_id, amount, status="confirmed", contributor_id=1, method="wallet"):
    return SimpleNamespace(
        cart_item_id=item_id, amount=amount, status=status,
        contributor_id=contributor_id, payment_method=method,
    )


def test_pending_contributions_are_excluded():
    item = _item(1, to_minor(500))
    contributions = [
        _c(1, to_minor(200)),
        _c(1, to_minor(150), status="pending", contributor_id=2),
        _c(1, to_minor(300), status="contributed", contributor_id=3, method="upi"),
    ]
    t = item_target(item, contributions)
    assert t.current_amount == 50000
    assert t.pending_amount == 15000
    assert t.is_complete is True
    assert t.progress == 100.0
    assert t.remaining_amount == 0


def test_adding_pending_never_completes_an_item():
    item = _item(1, 10000)
    before = item_target(item, [_c(1, 4000)])
    after = item_target(item, [_c(1, 4000), _c(1, 9000, status="pending")])
    assert before.is_complete is False
    assert after.is_complete is False
    assert after.progress == before.progress == 40.0


def test_zero_target_is_fully_funded():
    t = item_target(_item(1, 0), [])
    assert t.progress == 100.0
    assert t.is_complete is True
    assert funding_progress(0, 0) == 100.0


def test_progress_is_clamped():
    assert funding_progress(15000, 10000) == 100.0
    assert funding_progress(-5, 10000) == 0.0
    assert funding_progress(1, 3) == 33.33


def test_overfunded_item_keeps_actual_amount():
    t = item_target(_item(1, 10000), [_c(1, 8000), _c(1, 5000, contributor_id=2)])
    assert t.current_amount == 13000
    assert t.progress == 100.0
    assert t.remaining_amount == 0


def test_two_item_cart_partially_funded():
    items = [_item(1, to_minor(300)), _item(2, to_minor(700))]
    contributions = [_c(1, to_minor(300)), _c(2, to_minor(200), contributor_id=2)]
    funding = aggregate_cart(items, contributions)
    assert funding.all_items_funded is False
    assert funding.total_contributed == to_minor(500)
    assert funding.total_cart_value == to_minor(1000)
    assert funding.progress == 50.0
    assert funding.can_proceed is False
    assert funding.target_for(1).is_complete is True
    assert funding.target_for(2).remaining_amount == to_minor(500)


def test_empty_cart_cannot_proceed():
    funding = aggregate_cart([], [])
    assert funding.all_items_funded is True
    assert funding.can_proceed is False
    assert funding.progress == 100.0


def test_contributors_are_grouped_per_member():
    t = item_target(_item(1, 10000), [
        _c(1, 2000, contributor_id=7, method="wallet"),
        _c(1, 3000, contributor_id=7, method="upi", status="contributed"),
        _c(1, 1000, contributor_id=8, status="pending", method="phonepe"),
    ])
    by_id = {c["contributorId"]: c for c in t.contributors}
    assert by_id[7]["counted"] == 5000
    assert by_id[7]["methods"] == ["wallet", "upi"]
    assert by_id[8]["counted"] == 0
    assert by_id[8]["pending"] == 1000


def test_funding_to_dict_shape():
    data = aggregate_cart([_item(1, 25050, name="Rice")], [_c(1, 25050)]).to_dict()
    assert data["canProceedToOrder"] is True
    assert data["stale"] is False
    assert data["items"][0]["target_display"] == "250.50"


def test_money_helpers():
    assert to_minor("12.345") == 1235
    assert display(5000) == "₹50.00"
    assert split_evenly(5000, 3) == [1667, 1667, 1666]
    assert sum(split_evenly(101, 4)) == 101
