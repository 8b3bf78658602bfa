# =========================================================
# TRANSACTIONS ROUTER
#
# Completed sales. Records are created by draft checkout and
# only change through the edit flow, which re-derives every
# figure from the revised lines. There is no delete.
# =========================================================

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from kasir.database import get_db
from kasir.core.checkout import price_cart
from kasir.core.ledger import apply_date_range, get_transaction_or_404, revise_items
from kasir.models.transactions import Transaction
from kasir.schemas.transaction import TransactionResponse, TransactionUpdate

logger = logging.getLogger("kasir")

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    customer: Optional[str] = Query(None, description="Customer name or phone fragment"),
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    query = apply_date_range(db.query(Transaction), start_date, end_date)

    if customer:
        pattern = f"%{customer.strip()}%"
        query = query.filter(
            or_(
                Transaction.customer_name.ilike(pattern),
                Transaction.customer_phone.ilike(pattern),
            )
        )

    query = query.order_by(Transaction.date.desc(), Transaction.id.desc()).offset(offset)

    if limit:
        query = query.limit(limit)

    return query.all()


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    return get_transaction_or_404(db, transaction_id)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    update_data: TransactionUpdate,
    db: Session = Depends(get_db),
):
    transaction = get_transaction_or_404(db, transaction_id)

    items = revise_items(db, transaction.items, update_data.items)

    # Rejects the edit when the revised total exceeds the payment
    figures = price_cart(items, update_data.payment)

    transaction.items = items
    for field, value in figures.items():
        setattr(transaction, field, value)

    transaction.customer_name = update_data.customer_name
    transaction.customer_phone = update_data.customer_phone

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update transaction {transaction_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to update transaction",
        )

    db.refresh(transaction)

    logger.info(
        f"Transaction {transaction.id} updated "
        f"Total: {transaction.total} "
        f"Change: {transaction.change}"
    )

    return transaction
