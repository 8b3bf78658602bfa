# kasir/core/catalog.py

from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from kasir.core.config import settings
from kasir.models.products import Product


def get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


def search_products(products: list[Product], term: str) -> list[Product]:
    term = term.strip().lower()
    if not term:
        return products

    return [
        product
        for product in products
        if term in product.name.lower()
        or any(term in code.lower() for code in product.barcodes or [])
    ]


def find_by_barcode(products: list[Product], code: str) -> Optional[Product]:
    code = code.strip().lower()
    if not code:
        return None

    for product in products:
        if any(existing.lower() == code for existing in product.barcodes or []):
            return product

    return None


def ensure_barcodes_free(db: Session, barcodes: list[str], exclude_id: Optional[int] = None):
    owners = {}
    query = db.query(Product)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)

    for product in query.all():
        for code in product.barcodes or []:
            owners[code.lower()] = product

    for code in barcodes:
        owner = owners.get(code.lower())
        if owner:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Barcode {code} is already used by {owner.name}",
            )


def is_low_stock(product: Product, threshold: Optional[int] = None) -> bool:
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    return product.stock < threshold


def to_stock_item(product: Product) -> dict:
    threshold = settings.LOW_STOCK_THRESHOLD

    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "price": product.price,
        "barcodes": product.barcodes or [],
        "stock": product.stock,
        "image": product.image or "",
        "threshold": threshold,
        "low_stock": is_low_stock(product, threshold),
    }
