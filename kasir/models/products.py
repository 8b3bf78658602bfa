# kasir/models/products.py

from sqlalchemy import CheckConstraint, Column, Index, Integer, String, Numeric, Text, JSON, DateTime
from sqlalchemy.sql import func

from kasir.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    category = Column(String, nullable=False)

    # Scan codes; each one belongs to a single product
    barcodes = Column(JSON, nullable=False, default=list)

    stock = Column(Integer, nullable=False, default=0)
    image = Column(Text, nullable=False, default="")

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_products_name", "name"),
        Index("ix_products_category", "category"),
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
    )
