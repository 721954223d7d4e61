from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PaymentMethodName = Literal["wallet", "upi", "googlepay", "phonepe", "cod", "card"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ContributionRequest(CamelModel):
    """Amounts are integer paise."""
    cart_item_id: int
    amount: int = Field(gt=0)
    payment_method: PaymentMethodName
    transaction_id: Optional[str] = Field(default=None, max_length=120)
    card_token: Optional[str] = None


class ContributionCreateRequest(CamelModel):
    """UPI success path: ``transaction_id`` is the payment session reference."""
    room_id: int
    cart_item_id: int
    amount: int = Field(gt=0)
    payment_method: PaymentMethodName
    transaction_id: str = Field(min_length=1, max_length=120)


class PaymentCallbackRequest(CamelModel):
    reference_id: str = Field(min_length=1, max_length=120)
    provider_transaction_id: Optional[str] = Field(default=None, max_length=120)


class LedgerQuery(CamelModel):
    """Query string of the ledger feed; ``since``/``wait`` turn the read into a long-poll."""
    item_id: Optional[int] = None
    since: Optional[int] = Field(default=None, ge=0)
    wait: float = Field(default=0, ge=0)
