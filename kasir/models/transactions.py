# kasir/models/transactions.py

from sqlalchemy import Column, Index, Integer, DateTime, JSON, Numeric, String, CheckConstraint

from kasir.database import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Snapshot of the cart lines at checkout (or after an edit)
    items = Column(JSON, nullable=False)

    total = Column(Numeric(12, 2), nullable=False)
    payment = Column(Numeric(12, 2), nullable=False)
    change = Column(Numeric(12, 2), nullable=False)
    cogs = Column(Numeric(12, 2), nullable=False)
    profit = Column(Numeric(12, 2), nullable=False)

    date = Column(DateTime(timezone=True), nullable=False)

    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)

    __table_args__ = (
        Index("ix_transactions_date", "date"),
        Index("ix_transactions_customer_name", "customer_name"),
        Index("ix_transactions_customer_phone", "customer_phone"),
        CheckConstraint("payment >= total", name="ck_transaction_payment_covers_total"),
    )
