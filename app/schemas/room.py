from typing import Optional, Literal
from pydantic import Field

from app.schemas.contribution import CamelModel

DeliveryMode = Literal["single", "per_member"]


class CreateRoomRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    delivery_mode: DeliveryMode = "single"


class DeliveryModeRequest(CamelModel):
    delivery_mode: DeliveryMode


class CartAddRequest(CamelModel):
    room_id: int
    product_id: int
    name: str = Field(min_length=1, max_length=255)
    unit_price: int = Field(ge=0)
    quantity: int = 1


class CartUpdateRequest(CamelModel):
    room_id: int
    cart_item_id: int
    quantity: int


class CartRemoveRequest(CamelModel):
    room_id: int
    cart_item_id: int


class AddressRequest(CamelModel):
    is_primary: bool = False
    member_id: Optional[int] = None
    full_name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    address_line1: Optional[str] = Field(default=None, max_length=255)
    address_line2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    pincode: Optional[str] = Field(default=None, max_length=10)


class CheckoutRequest(CamelModel):
    room_id: int


class WalletLoadRequest(CamelModel):
    amount: int = Field(gt=0)
    reference: Optional[str] = "manual-load"
