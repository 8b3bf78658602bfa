# kasir/seed.py

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from kasir.models.products import Product

logger = logging.getLogger("kasir")

PLACEHOLDER_IMAGE = "https://placehold.co/300x300.png"

SAMPLE_PRODUCTS = [
    {"id": 1, "name": "Espresso", "price": Decimal("25000"), "category": "Kopi", "barcodes": ["CF-001", "8991234567890"], "stock": 100},
    {"id": 2, "name": "Latte", "price": Decimal("35000"), "category": "Kopi", "barcodes": ["CF-002"], "stock": 100},
    {"id": 3, "name": "Cappuccino", "price": Decimal("35000"), "category": "Kopi", "barcodes": ["CF-003"], "stock": 80},
    {"id": 4, "name": "Croissant", "price": Decimal("20000"), "category": "Roti", "barcodes": ["PS-001", "8991234567891"], "stock": 50},
    {"id": 5, "name": "Muffin", "price": Decimal("22000"), "category": "Roti", "barcodes": ["PS-002"], "stock": 60},
    {"id": 6, "name": "Air Mineral", "price": Decimal("10000"), "category": "Minuman", "barcodes": ["BV-001"], "stock": 200},
    {"id": 7, "name": "Es Teh", "price": Decimal("18000"), "category": "Minuman", "barcodes": ["BV-002"], "stock": 90},
    {"id": 8, "name": "Americano", "price": Decimal("30000"), "category": "Kopi", "barcodes": ["CF-004"], "stock": 120},
    {"id": 9, "name": "Kue Danish", "price": Decimal("25000"), "category": "Roti", "barcodes": ["PS-003"], "stock": 40},
    {"id": 10, "name": "Jus Jeruk", "price": Decimal("25000"), "category": "Minuman", "barcodes": ["BV-003"], "stock": 75},
    {"id": 11, "name": "Macchiato", "price": Decimal("27500"), "category": "Kopi", "barcodes": ["CF-005"], "stock": 70},
    {"id": 12, "name": "Roti Kayu Manis", "price": Decimal("32500"), "category": "Roti", "barcodes": ["PS-004"], "stock": 35},
]


def seed_products(db: Session) -> int:
    """Load the sample catalog into an empty products table. Returns rows added."""
    if db.query(Product).count() > 0:
        return 0

    db.add_all(Product(image=PLACEHOLDER_IMAGE, **data) for data in SAMPLE_PRODUCTS)
    db.commit()

    logger.info(f"Seeded {len(SAMPLE_PRODUCTS)} sample products")

    return len(SAMPLE_PRODUCTS)
