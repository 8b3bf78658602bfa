from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List


class StockAdjustment(BaseModel):
    stock: int = Field(..., ge=0)
    # Shown in logs only, never stored
    reason: str | None = None


class StockItemResponse(BaseModel):
    id: int
    name: str
    category: str
    price: Decimal
    barcodes: List[str]
    stock: int
    image: str
    threshold: int
    low_stock: bool

    class Config:
        from_attributes = True
