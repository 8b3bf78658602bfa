# kasir/routers/inventory.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from kasir.database import get_db
from kasir.core.catalog import get_product_or_404, is_low_stock, to_stock_item
from kasir.models.products import Product
from kasir.schemas.inventory import (
    StockAdjustment,
    StockItemResponse,
)

logger = logging.getLogger("kasir")

router = APIRouter(
    prefix="/stock",
    tags=["Stock"],
)


@router.get("", response_model=list[StockItemResponse])
def list_stock(db: Session = Depends(get_db)):
    products = db.query(Product).order_by(Product.id).all()
    return [to_stock_item(product) for product in products]


@router.get("/low", response_model=list[StockItemResponse])
def list_low_stock(db: Session = Depends(get_db)):
    products = (
        db.query(Product)
        .order_by(Product.stock, Product.id)
        .all()
    )
    return [to_stock_item(product) for product in products if is_low_stock(product)]


@router.put("/{product_id}", response_model=StockItemResponse)
def adjust_stock(
    product_id: int,
    adjustment: StockAdjustment,
    db: Session = Depends(get_db),
):
    product = get_product_or_404(db, product_id)

    previous_stock = product.stock
    product.stock = adjustment.stock

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to adjust stock for {product.name}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to adjust stock",
        )

    db.refresh(product)

    logger.info(
        f"Stock adjusted for {product.name}: {previous_stock} -> {product.stock}"
        + (f" Reason: {adjustment.reason}" if adjustment.reason else "")
    )

    return to_stock_item(product)
