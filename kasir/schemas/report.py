# schemas/report.py

from pydantic import BaseModel
from datetime import date
from decimal import Decimal
from typing import List, Optional



class SalesSummaryResponse(BaseModel):
    total_revenue: Decimal
    total_cogs: Decimal
    gross_profit: Decimal
    total_transactions: int
    total_items_sold: int
    average_order_value: Decimal
    start_date: Optional[date]
    end_date: Optional[date]


class ProductSalesResponse(BaseModel):
    product_id: int
    product_name: str
    category: str
    total_quantity_sold: int
    total_revenue: Decimal

class ProductSalesReportResponse(BaseModel):
    start_date: Optional[date]
    end_date: Optional[date]
    total_products: int
    results: List[ProductSalesResponse]
