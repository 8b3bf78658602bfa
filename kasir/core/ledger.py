# kasir/core/ledger.py

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, Query

from kasir.core.config import settings
from kasir.core.drafts import product_snapshot
from kasir.models.products import Product
from kasir.models.transactions import Transaction
from kasir.schemas.transaction import TransactionItemEdit


def get_transaction_or_404(db: Session, transaction_id: int) -> Transaction:
    transaction = (
        db.query(Transaction)
        .filter(Transaction.id == transaction_id)
        .first()
    )

    if not transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found",
        )

    return transaction


def store_timezone() -> ZoneInfo:
    return ZoneInfo(settings.STORE_TIMEZONE)


def to_store_time(value: datetime) -> datetime:
    # Stored timestamps are UTC; SQLite hands them back naive
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(store_timezone())


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of a calendar day in the store's timezone, as UTC."""
    tz = store_timezone()
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def apply_date_range(query: Query, start_date: Optional[date], end_date: Optional[date]) -> Query:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must be on or before end_date",
        )

    if start_date:
        query = query.filter(Transaction.date >= day_bounds(start_date)[0])

    if end_date:
        query = query.filter(Transaction.date <= day_bounds(end_date)[1])

    return query


def revise_items(db: Session, current_items: list[dict], edits: list[TransactionItemEdit]) -> list[dict]:
    """
    Rebuild a transaction's line snapshots from an edited list.

    Products already on the transaction keep their recorded price;
    new ones are taken from the catalog as it is now.
    """
    recorded = {line["id"]: line for line in current_items}
    revised: list[dict] = []
    positions: dict[int, int] = {}

    for edit in edits:
        if edit.product_id in positions:
            revised[positions[edit.product_id]]["quantity"] += edit.quantity
            continue

        if edit.product_id in recorded:
            snapshot = {k: v for k, v in recorded[edit.product_id].items() if k != "quantity"}
        else:
            product = db.query(Product).filter(Product.id == edit.product_id).first()
            if not product:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Product {edit.product_id} not found",
                )
            snapshot = product_snapshot(product)

        positions[edit.product_id] = len(revised)
        revised.append({**snapshot, "quantity": edit.quantity})

    return revised
