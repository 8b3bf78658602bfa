# schemas/cart.py

from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import List, Optional


class CartItem(BaseModel):
    id: int
    name: str
    price: Decimal
    category: str
    barcodes: List[str] = []
    stock: int = 0
    image: str = ""
    quantity: int = Field(..., ge=1)

    class Config:
        from_attributes = True


class DraftCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def blank_to_none(cls, value):
        if value is not None and not value.strip():
            return None
        return value.strip() if value else value


class DraftRename(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class DraftResponse(BaseModel):
    id: str
    name: str
    is_active: bool
    items: List[CartItem]
    item_count: int
    total: Decimal


class DraftListResponse(BaseModel):
    active_draft_id: Optional[str]
    drafts: List[DraftResponse]


class CartItemAdd(BaseModel):
    product_id: int


class QuantityUpdate(BaseModel):
    # Zero or negative removes the line
    quantity: int


class BarcodeScan(BaseModel):
    code: str = Field(..., min_length=1)


class CheckoutRequest(BaseModel):
    payment: Decimal = Field(..., ge=0)
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def blank_to_none(cls, value):
        if value is None:
            return None
        value = value.strip()
        return value or None


class CheckoutPreview(BaseModel):
    total: Decimal
    payment: Optional[Decimal]
    change: Decimal
    can_checkout: bool
    quick_cash: List[Decimal]
