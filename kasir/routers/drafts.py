# =========================================================
# DRAFT CARTS ROUTER
#
# Cart sessions for the cashier screen:
# - Several named drafts, one active at a time
# - Lines are product snapshots, one per product
# - Checkout turns a draft into a transaction and drops it
# =========================================================

import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from kasir.database import get_db
from kasir.core.config import settings
from kasir.core.rate_limiter import limiter
from kasir.core.catalog import find_by_barcode, get_product_or_404
from kasir.core.checkout import (
    build_transaction,
    can_checkout,
    cart_total,
    change_due,
    item_count,
    quick_cash_options,
)
from kasir.core.drafts import (
    add_line,
    create_draft,
    delete_draft,
    ensure_session,
    get_active_draft,
    get_draft_or_404,
    has_line,
    list_drafts,
    remove_line,
    set_line_quantity,
    switch_draft,
)
from kasir.models.drafts import DraftCart
from kasir.models.products import Product
from kasir.schemas.cart import (
    BarcodeScan,
    CartItemAdd,
    CheckoutPreview,
    CheckoutRequest,
    DraftCreate,
    DraftListResponse,
    DraftRename,
    DraftResponse,
    QuantityUpdate,
)
from kasir.schemas.transaction import TransactionResponse

logger = logging.getLogger("kasir")

router = APIRouter(prefix="/drafts", tags=["Cart Sessions"])


# =========================================================
# HELPERS
# =========================================================
def _save(db: Session):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save cart session: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to save cart session",
        )


def _draft_response(draft: DraftCart) -> DraftResponse:
    return DraftResponse(
        id=draft.id,
        name=draft.name,
        is_active=draft.is_active,
        items=draft.items,
        item_count=item_count(draft.items),
        total=cart_total(draft.items),
    )


def _list_response(db: Session) -> DraftListResponse:
    drafts = list_drafts(db)
    active = next((draft for draft in drafts if draft.is_active), None)

    return DraftListResponse(
        active_draft_id=active.id if active else None,
        drafts=[_draft_response(draft) for draft in drafts],
    )


def _add_product(db: Session, draft: DraftCart, product: Product) -> DraftResponse:
    draft.items = add_line(draft.items, product)
    _save(db)
    db.refresh(draft)
    return _draft_response(draft)


def _decrement_stock(db: Session, items: list[dict]):
    for line in items:
        product = (
            db.query(Product)
            .filter(Product.id == line["id"])
            .with_for_update()
            .first()
        )

        if not product:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{line['name']} is no longer in the catalog",
            )

        if product.stock < line["quantity"]:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Insufficient stock for {product.name}",
            )

        product.stock -= line["quantity"]


# =========================================================
# SESSIONS
# =========================================================
@router.get("", response_model=DraftListResponse)
def get_drafts(db: Session = Depends(get_db)):
    # First load: make sure a cart session exists and one is active
    ensure_session(db)
    _save(db)
    return _list_response(db)


@router.post("", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
def new_draft(draft_data: DraftCreate, db: Session = Depends(get_db)):
    draft = create_draft(db, draft_data.name)
    _save(db)
    db.refresh(draft)
    return _draft_response(draft)


@router.get("/{draft_id}", response_model=DraftResponse)
def get_draft(draft_id: str, db: Session = Depends(get_db)):
    return _draft_response(get_draft_or_404(db, draft_id))


@router.patch("/{draft_id}", response_model=DraftResponse)
def rename_draft(draft_id: str, draft_data: DraftRename, db: Session = Depends(get_db)):
    draft = get_draft_or_404(db, draft_id)
    draft.name = draft_data.name.strip() or draft.name
    _save(db)
    db.refresh(draft)
    return _draft_response(draft)


@router.post("/{draft_id}/activate", response_model=DraftListResponse)
def activate_draft(draft_id: str, db: Session = Depends(get_db)):
    switch_draft(db, draft_id)
    _save(db)
    return _list_response(db)


@router.delete("/{draft_id}", response_model=DraftListResponse)
def remove_draft(draft_id: str, db: Session = Depends(get_db)):
    delete_draft(db, draft_id)
    _save(db)
    return _list_response(db)


# =========================================================
# CART LINES
# =========================================================
@router.post("/active/items", response_model=DraftResponse)
def add_to_active_cart(item: CartItemAdd, db: Session = Depends(get_db)):
    draft = get_active_draft(db)

    if not draft:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No active cart session",
        )

    product = get_product_or_404(db, item.product_id)
    return _add_product(db, draft, product)


@router.post("/{draft_id}/items", response_model=DraftResponse)
def add_to_cart(draft_id: str, item: CartItemAdd, db: Session = Depends(get_db)):
    draft = get_draft_or_404(db, draft_id)
    product = get_product_or_404(db, item.product_id)
    return _add_product(db, draft, product)


@router.post("/{draft_id}/scan", response_model=DraftResponse)
def scan_barcode(draft_id: str, scan: BarcodeScan, db: Session = Depends(get_db)):
    draft = get_draft_or_404(db, draft_id)
    product = find_by_barcode(db.query(Product).all(), scan.code)

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'No item with barcode "{scan.code.strip()}"',
        )

    logger.info(f"Scanned {scan.code.strip()} into {draft.name}: {product.name}")

    return _add_product(db, draft, product)


@router.put("/{draft_id}/items/{product_id}", response_model=DraftResponse)
def update_quantity(
    draft_id: str,
    product_id: int,
    update: QuantityUpdate,
    db: Session = Depends(get_db),
):
    draft = get_draft_or_404(db, draft_id)

    if update.quantity > 0 and not has_line(draft.items, product_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item is not in this cart",
        )

    draft.items = set_line_quantity(draft.items, product_id, update.quantity)
    _save(db)
    db.refresh(draft)
    return _draft_response(draft)


@router.delete("/{draft_id}/items/{product_id}", response_model=DraftResponse)
def remove_from_cart(draft_id: str, product_id: int, db: Session = Depends(get_db)):
    draft = get_draft_or_404(db, draft_id)
    draft.items = remove_line(draft.items, product_id)
    _save(db)
    db.refresh(draft)
    return _draft_response(draft)


@router.delete("/{draft_id}/items", response_model=DraftResponse)
def clear_cart(draft_id: str, db: Session = Depends(get_db)):
    draft = get_draft_or_404(db, draft_id)
    draft.items = []
    _save(db)
    db.refresh(draft)
    return _draft_response(draft)


# =========================================================
# CHECKOUT
# =========================================================
@router.get("/{draft_id}/checkout", response_model=CheckoutPreview)
def preview_checkout(
    draft_id: str,
    payment: Optional[Decimal] = Query(None, ge=0),
    db: Session = Depends(get_db),
):
    draft = get_draft_or_404(db, draft_id)
    total = cart_total(draft.items)

    return CheckoutPreview(
        total=total,
        payment=payment,
        change=change_due(total, payment),
        can_checkout=bool(draft.items) and can_checkout(total, payment),
        quick_cash=quick_cash_options(total),
    )


@router.post(
    "/{draft_id}/checkout",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.CHECKOUT_RATE_LIMIT)
def checkout(
    request: Request,
    draft_id: str,
    checkout_data: CheckoutRequest,
    db: Session = Depends(get_db),
):
    draft = get_draft_or_404(db, draft_id)

    if not draft.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    transaction = build_transaction(
        draft.items,
        checkout_data.payment,
        customer_name=checkout_data.customer_name,
        customer_phone=checkout_data.customer_phone,
    )

    try:
        if settings.DECREMENT_STOCK_ON_CHECKOUT:
            _decrement_stock(db, draft.items)

        db.add(transaction)
        db.delete(draft)
        db.flush()

        # Keep a cart session available for the next customer
        ensure_session(db)

        db.commit()

    except HTTPException:
        db.rollback()
        raise

    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Checkout failed for {draft_id}: {e}")
        raise HTTPException(status_code=500, detail="Unable to complete checkout")

    db.refresh(transaction)

    logger.info(
        f"Transaction {transaction.id} recorded "
        f"Total: {transaction.total} "
        f"Payment: {transaction.payment} "
        f"Change: {transaction.change}"
    )

    return transaction
