# kasir/models/drafts.py

from sqlalchemy import Boolean, Column, Integer, String, JSON, DateTime
from sqlalchemy.sql import func

from kasir.database import Base


class DraftCart(Base):
    __tablename__ = "draft_carts"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)

    # Ordered cart lines: product snapshot + quantity, one line per product id
    items = Column(JSON, nullable=False, default=list)

    is_active = Column(Boolean, default=False, nullable=False)

    # Creation order; "first remaining draft" is the lowest position
    position = Column(Integer, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
