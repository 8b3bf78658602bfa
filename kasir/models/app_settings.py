# kasir/models/app_settings.py

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from kasir.database import Base


class AppSettings(Base):
    __tablename__ = "app_settings"

    # Single record, always id 1
    id = Column(Integer, primary_key=True)

    store_name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    receipt_footer = Column(Text, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
