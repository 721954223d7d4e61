from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

TWOPLACES = Decimal("0.01")
PAISE_PER_RUPEE = 100


def to_minor(rupees) -> int:
    """Convert a rupee amount (str/number/Decimal) to integer paise."""
    try:
        d = Decimal(str(rupees))
    except InvalidOperation:
        raise ValueError(f"not a money amount: {rupees!r}")
    return int((d * PAISE_PER_RUPEE).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major(paise: int) -> Decimal:
    return (Decimal(int(paise)) / PAISE_PER_RUPEE).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def display(paise: int) -> str:
    return f"₹{to_major(paise)}"


def split_evenly(total: int, parts: int):
    """Split ``total`` paise into ``parts`` shares; remainder goes to the first shares."""
    if parts < 1:
        raise ValueError("parts must be at least 1")
    base, rem = divmod(int(total), parts)
    return [base + (1 if i < rem else 0) for i in range(parts)]
