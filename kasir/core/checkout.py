# =========================================================
# CHECKOUT CALCULATOR
#
# Totals, change, quick-cash suggestions and the fixed-ratio
# cost/profit split for a list of cart lines.
#
# Cart lines are the JSON snapshots stored on drafts and
# transactions: dicts carrying at least "price" and "quantity".
# =========================================================

from datetime import datetime, timezone
from decimal import Decimal, ROUND_CEILING
from typing import Optional

from fastapi import HTTPException, status

from kasir.core.config import settings
from kasir.models.transactions import Transaction

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT)


def line_total(line: dict) -> Decimal:
    return to_money(line["price"]) * int(line["quantity"])


def cart_total(items: list[dict]) -> Decimal:
    total = Decimal("0.00")
    for line in items:
        total += line_total(line)
    return total


def item_count(items: list[dict]) -> int:
    return sum(int(line["quantity"]) for line in items)


def can_checkout(total: Decimal, payment: Optional[Decimal]) -> bool:
    return payment is not None and payment >= total


def change_due(total: Decimal, payment: Optional[Decimal]) -> Decimal:
    if not can_checkout(total, payment):
        return Decimal("0.00")
    return to_money(payment - total)


def cost_split(total: Decimal) -> tuple[Decimal, Decimal]:
    """Placeholder costing: COGS is a fixed share of the total, profit the rest."""
    cogs = (total * settings.COGS_RATIO).quantize(CENT)
    return cogs, to_money(total - cogs)


def quick_cash_options(total: Decimal) -> list[Decimal]:
    """
    Suggested tender amounts: the exact total rounded up to a whole unit,
    plus the smallest multiple of each configured denomination that covers it.
    """
    exact = Decimal(total).to_integral_value(rounding=ROUND_CEILING)

    options = {exact}
    for denomination in settings.QUICK_CASH_DENOMINATIONS:
        step = Decimal(denomination)
        options.add((exact / step).to_integral_value(rounding=ROUND_CEILING) * step)

    # exact is the smallest option, so the cap never drops it
    return sorted(options)[: max(settings.QUICK_CASH_MAX_OPTIONS, 1)]


def price_cart(items: list[dict], payment: Decimal) -> dict:
    total = cart_total(items)

    if not can_checkout(total, payment):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Insufficient payment: total is {total}, payment is {to_money(payment)}",
        )

    cogs, profit = cost_split(total)

    return {
        "total": total,
        "payment": to_money(payment),
        "change": change_due(total, payment),
        "cogs": cogs,
        "profit": profit,
    }


def build_transaction(
    items: list[dict],
    payment: Decimal,
    customer_name: Optional[str] = None,
    customer_phone: Optional[str] = None,
    date: Optional[datetime] = None,
) -> Transaction:
    figures = price_cart(items, payment)

    return Transaction(
        items=[dict(line) for line in items],
        date=date or datetime.now(timezone.utc),
        customer_name=customer_name,
        customer_phone=customer_phone,
        **figures,
    )
