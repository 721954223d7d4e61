"""Funding aggregation for a room cart.

Everything here is a pure function of the cart items and the contribution
records; nothing is persisted. All amounts are integer paise.
"""
from dataclasses import dataclass, field, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from app.services.money import to_major

# Pending contributions are visible in the ledger but never fund an item.
COUNTED_STATUSES = frozenset({"contributed", "confirmed"})

HUNDRED = Decimal("100")


@dataclass
class ContributionTarget:
    item_id: int
    name: str
    target_amount: int
    current_amount: int
    pending_amount: int
    remaining_amount: int
    progress: float
    is_complete: bool
    contributors: List[Dict] = field(default_factory=list)

    def to_dict(self):
        data = asdict(self)
        data["target_display"] = str(to_major(self.target_amount))
        data["current_display"] = str(to_major(self.current_amount))
        return data


@dataclass
class CartFunding:
    targets: List[ContributionTarget]
    total_cart_value: int
    total_contributed: int
    progress: float
    all_items_funded: bool
    stale: bool = False

    @property
    def can_proceed(self):
        return self.all_items_funded and bool(self.targets)

    def target_for(self, item_id):
        for t in self.targets:
            if t.item_id == item_id:
                return t
        return None

    def to_dict(self):
        return {
            "items": [t.to_dict() for t in self.targets],
            "totalCartValue": self.total_cart_value,
            "totalContributed": self.total_contributed,
            "progress": self.progress,
            "allItemsFunded": self.all_items_funded,
            "canProceedToOrder": self.can_proceed,
            "stale": self.stale,
        }


def is_counted(contribution) -> bool:
    return contribution.status in COUNTED_STATUSES


def funding_progress(current: int, target: int) -> float:
    if target <= 0:
        return 100.0
    pct = Decimal(int(current)) * HUNDRED / Decimal(int(target))
    pct = max(Decimal("0"), min(HUNDRED, pct))
    return float(pct.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _contributors(contributions) -> List[Dict]:
    by_member: Dict[int, Dict] = {}
    for c in contributions:
        entry = by_member.setdefault(
            c.contributor_id,
            {"contributorId": c.contributor_id, "counted": 0, "pending": 0, "methods": []},
        )
        if is_counted(c):
            entry["counted"] += int(c.amount)
        else:
            entry["pending"] += int(c.amount)
        if c.payment_method not in entry["methods"]:
            entry["methods"].append(c.payment_method)
    return list(by_member.values())


def item_target(item, contributions: Iterable) -> ContributionTarget:
    """Funding state of one cart item from the contributions made against it."""
    mine = [c for c in contributions if c.cart_item_id == item.id]
    target = int(item.target_amount)
    current = sum(int(c.amount) for c in mine if is_counted(c))
    pending = sum(int(c.amount) for c in mine if not is_counted(c))
    return ContributionTarget(
        item_id=item.id,
        name=getattr(item, "name", ""),
        target_amount=target,
        current_amount=current,
        pending_amount=pending,
        remaining_amount=max(0, target - current),
        progress=funding_progress(current, target),
        is_complete=current >= target,
        contributors=_contributors(mine),
    )


def aggregate_cart(items: Iterable, contributions: Iterable) -> CartFunding:
    contributions = list(contributions)
    targets = [item_target(item, contributions) for item in items]
    total_value = sum(t.target_amount for t in targets)
    total_contributed = sum(t.current_amount for t in targets)
    return CartFunding(
        targets=targets,
        total_cart_value=total_value,
        total_contributed=total_contributed,
        progress=funding_progress(total_contributed, total_value),
        all_items_funded=all(t.is_complete for t in targets),
    )
