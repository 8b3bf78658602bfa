from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)

    price: Decimal = Field(
        ...,
        ge=0,
        lt=10_000_000_000,
        description="Selling price, zero or more",
    )

    barcodes: List[str] = Field(..., min_length=1, description="At least one scan code")
    stock: int = Field(0, ge=0)
    image: str = ""

    @field_validator("name", "category", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("barcodes")
    @classmethod
    def clean_barcodes(cls, value: List[str]) -> List[str]:
        cleaned = []
        seen = set()
        for code in value:
            code = code.strip()
            # Scans match case-insensitively
            if code and code.lower() not in seen:
                seen.add(code.lower())
                cleaned.append(code)

        if not cleaned:
            raise ValueError("At least one barcode is required")

        return cleaned


class ProductCreate(ProductBase):
    # Generated when omitted
    id: int | None = Field(None, gt=0)


class ProductUpdate(ProductBase):
    pass


class ProductResponse(BaseModel):
    id: int
    name: str
    price: Decimal
    category: str
    barcodes: List[str]
    stock: int
    image: str
    created_at: datetime

    class Config:
        from_attributes = True
