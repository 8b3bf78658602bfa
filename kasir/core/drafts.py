# =========================================================
# DRAFT CART MANAGER
#
# Several named cart sessions can be open at once; exactly one
# is active (shown and eligible for checkout). Once a session
# has been requested there is always at least one draft.
#
# Helpers flush but never commit; routers own the commit.
# =========================================================

import logging
from uuid import uuid4
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from kasir.core.config import settings
from kasir.models.drafts import DraftCart
from kasir.models.products import Product

logger = logging.getLogger("kasir")


# =========================================================
# CART LINES
# =========================================================
def product_snapshot(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "price": str(product.price),
        "category": product.category,
        "barcodes": list(product.barcodes or []),
        "stock": product.stock,
        "image": product.image or "",
    }


def has_line(items: list[dict], product_id: int) -> bool:
    return any(line["id"] == product_id for line in items)


def add_line(items: list[dict], product: Product) -> list[dict]:
    lines = [dict(line) for line in items]

    for line in lines:
        if line["id"] == product.id:
            line["quantity"] += 1
            return lines

    lines.append({**product_snapshot(product), "quantity": 1})
    return lines


def remove_line(items: list[dict], product_id: int) -> list[dict]:
    return [dict(line) for line in items if line["id"] != product_id]


def set_line_quantity(items: list[dict], product_id: int, quantity: int) -> list[dict]:
    if quantity <= 0:
        return remove_line(items, product_id)

    return [
        {**line, "quantity": quantity} if line["id"] == product_id else dict(line)
        for line in items
    ]


# =========================================================
# DRAFTS
# =========================================================
def list_drafts(db: Session) -> list[DraftCart]:
    return db.query(DraftCart).order_by(DraftCart.position).all()


def get_active_draft(db: Session) -> Optional[DraftCart]:
    return (
        db.query(DraftCart)
        .filter(DraftCart.is_active.is_(True))
        .order_by(DraftCart.position)
        .first()
    )


def get_draft_or_404(db: Session, draft_id: str) -> DraftCart:
    draft = db.query(DraftCart).filter(DraftCart.id == draft_id).first()

    if not draft:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cart session not found",
        )

    return draft


def _default_name(drafts: list[DraftCart]) -> str:
    taken = {draft.name for draft in drafts}
    number = len(drafts) + 1

    while f"{settings.DRAFT_NAME_PREFIX} {number}" in taken:
        number += 1

    return f"{settings.DRAFT_NAME_PREFIX} {number}"


def _activate(db: Session, draft: DraftCart):
    others = (
        db.query(DraftCart)
        .filter(DraftCart.is_active.is_(True), DraftCart.id != draft.id)
        .all()
    )
    for other in others:
        other.is_active = False

    draft.is_active = True


def create_draft(db: Session, name: Optional[str] = None) -> DraftCart:
    drafts = list_drafts(db)
    next_position = (db.query(func.max(DraftCart.position)).scalar() or 0) + 1

    draft = DraftCart(
        id=uuid4().hex,
        name=name or _default_name(drafts),
        items=[],
        position=next_position,
        is_active=False,
    )
    db.add(draft)
    _activate(db, draft)
    db.flush()

    logger.info(f"Cart session created: {draft.name} ({draft.id})")

    return draft


def ensure_session(db: Session) -> DraftCart:
    """Return the active draft, activating the first one or creating one if needed."""
    active = get_active_draft(db)
    if active:
        return active

    drafts = list_drafts(db)
    if not drafts:
        return create_draft(db)

    _activate(db, drafts[0])
    db.flush()
    return drafts[0]


def switch_draft(db: Session, draft_id: str) -> DraftCart:
    draft = get_draft_or_404(db, draft_id)
    _activate(db, draft)
    db.flush()
    return draft


def delete_draft(db: Session, draft_id: str) -> DraftCart:
    draft = get_draft_or_404(db, draft_id)

    db.delete(draft)
    db.flush()

    logger.info(f"Cart session removed: {draft.name} ({draft.id})")

    return ensure_session(db)
