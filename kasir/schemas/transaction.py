# schemas/transaction.py

from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import List, Optional
from decimal import Decimal

from kasir.schemas.cart import CartItem


class TransactionItemEdit(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)


class TransactionUpdate(BaseModel):
    items: List[TransactionItemEdit] = Field(..., min_length=1)
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


class TransactionResponse(BaseModel):
    id: int
    items: List[CartItem]
    total: Decimal
    payment: Decimal
    change: Decimal
    date: datetime
    cogs: Decimal
    profit: Decimal
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None

    @field_validator("date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite returns the stored UTC timestamp without an offset
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    class Config:
        from_attributes = True
