# kasir/routers/products.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from kasir.database import get_db
from kasir.core.catalog import (
    ensure_barcodes_free,
    find_by_barcode,
    get_product_or_404,
    search_products,
)
from kasir.models.products import Product
from kasir.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

logger = logging.getLogger("kasir")

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


def _save(db: Session, product: Product, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action} product {product.name}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Unable to {action} product",
        )

    db.refresh(product)
    logger.info(f"Product {action}d: {product.id} {product.name}")


@router.get("", response_model=list[ProductResponse])
def list_products(
    search: Optional[str] = Query(None, description="Name or barcode fragment"),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(Product)

    if category:
        query = query.filter(Product.category == category)

    products = query.order_by(Product.id).all()

    if search:
        products = search_products(products, search)

    return products


@router.get("/categories", response_model=list[str])
def list_categories(db: Session = Depends(get_db)):
    rows = db.query(Product.category).distinct().all()
    return sorted(row.category for row in rows)


@router.get("/barcode/{code}", response_model=ProductResponse)
def get_product_by_barcode(code: str, db: Session = Depends(get_db)):
    product = find_by_barcode(db.query(Product).all(), code)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'No item with barcode "{code}"',
        )

    return product


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_product_or_404(db, product_id)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
):
    if product_data.id is not None:
        existing_product = db.query(Product).filter(Product.id == product_data.id).first()
        if existing_product:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product with this id already exists",
            )

    ensure_barcodes_free(db, product_data.barcodes)

    product = Product(**product_data.model_dump(exclude_none=True))

    db.add(product)
    _save(db, product, "create")

    return product


@router.put("/{product_id}", response_model=ProductResponse)
def upsert_product(
    product_data: ProductUpdate,
    product_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
):
    ensure_barcodes_free(db, product_data.barcodes, exclude_id=product_id)

    product = db.query(Product).filter(Product.id == product_id).first()

    # Last write wins; an unknown id creates the product
    if not product:
        product = Product(id=product_id)
        db.add(product)

    for field, value in product_data.model_dump().items():
        setattr(product, field, value)

    _save(db, product, "update")

    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    product = get_product_or_404(db, product_id)

    db.delete(product)
    db.commit()

    logger.info(f"Product deleted: {product_id}")

    return None
