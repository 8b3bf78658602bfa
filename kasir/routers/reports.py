# =========================================================
# REPORTS ROUTER
#
# Read-only views over the transaction ledger:
# - Summary: revenue, COGS, gross profit, volume
# - Product sales from the line snapshots
# - Excel export of the same period
#
# Every range is optional and inclusive on both ends.
# =========================================================

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import date
from decimal import Decimal
from io import BytesIO
from typing import Optional

from openpyxl import Workbook

from kasir.database import get_db
from kasir.core.checkout import CENT, line_total, to_money
from kasir.models.transactions import Transaction
from kasir.core.ledger import apply_date_range, to_store_time
from kasir.routers.store_settings import load_settings
from kasir.schemas.report import (
    SalesSummaryResponse,
    ProductSalesReportResponse,
    ProductSalesResponse,
)

router = APIRouter(prefix="/reports", tags=["Reports"])


# =========================================================
# CORE SUMMARY CALCULATION
# =========================================================
def _calculate_summary(
    db: Session,
    start_date: Optional[date],
    end_date: Optional[date],
):
    totals = apply_date_range(
        db.query(
            func.coalesce(func.sum(Transaction.total), 0).label("revenue"),
            func.coalesce(func.sum(Transaction.cogs), 0).label("cogs"),
            func.coalesce(func.sum(Transaction.profit), 0).label("profit"),
            func.count(Transaction.id).label("orders"),
        ),
        start_date,
        end_date,
    ).one()

    snapshots = apply_date_range(db.query(Transaction.items), start_date, end_date).all()

    total_items_sold = sum(
        int(line["quantity"])
        for (lines,) in snapshots
        for line in lines
    )

    total_revenue = to_money(totals.revenue or 0)
    total_transactions = totals.orders or 0

    if total_transactions == 0:
        average_order_value = Decimal("0.00")
    else:
        average_order_value = (total_revenue / total_transactions).quantize(CENT)

    return {
        "total_revenue": total_revenue,
        "total_cogs": to_money(totals.cogs or 0),
        "gross_profit": to_money(totals.profit or 0),
        "total_transactions": total_transactions,
        "total_items_sold": total_items_sold,
        "average_order_value": average_order_value,
        "start_date": start_date,
        "end_date": end_date,
    }


# =========================================================
# CORE PRODUCT SALES CALCULATION
# =========================================================
def _calculate_product_sales(
    db: Session,
    start_date: Optional[date],
    end_date: Optional[date],
    search: Optional[str],
):
    transactions = (
        apply_date_range(db.query(Transaction), start_date, end_date)
        .order_by(Transaction.date)
        .all()
    )

    rows: dict[int, dict] = {}

    for transaction in transactions:
        for line in transaction.items:
            row = rows.setdefault(
                line["id"],
                {
                    "product_id": line["id"],
                    "total_quantity_sold": 0,
                    "total_revenue": Decimal("0.00"),
                },
            )
            # Latest snapshot names the product
            row["product_name"] = line["name"]
            row["category"] = line["category"]
            row["total_quantity_sold"] += int(line["quantity"])
            row["total_revenue"] += line_total(line)

    results = list(rows.values())

    if search:
        term = search.strip().lower()
        results = [row for row in results if term in row["product_name"].lower()]

    results.sort(key=lambda row: (-row["total_revenue"], row["product_id"]))

    return {
        "start_date": start_date,
        "end_date": end_date,
        "total_products": len(results),
        "results": [ProductSalesResponse(**row) for row in results],
    }


# =========================================================
# ROUTES
# =========================================================
@router.get("/summary", response_model=SalesSummaryResponse)
def sales_summary(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    return _calculate_summary(db, start_date, end_date)


@router.get("/products", response_model=ProductSalesReportResponse)
def product_sales(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return _calculate_product_sales(db, start_date, end_date, search)


@router.get("/export")
def export_transactions(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    transactions = (
        apply_date_range(db.query(Transaction), start_date, end_date)
        .order_by(Transaction.date, Transaction.id)
        .all()
    )

    summary = _calculate_summary(db, start_date, end_date)
    store = load_settings(db)

    period = f"{start_date or 'start'}_to_{end_date or 'today'}"

    return _build_excel(
        transactions=transactions,
        summary=summary,
        store_name=store.store_name,
        filename=f"transactions_{period}.xlsx",
    )


# =========================================================
# EXCEL BUILDER
# =========================================================
def _build_excel(
    transactions: list[Transaction],
    summary: dict,
    store_name: str,
    filename: str,
):

    workbook = Workbook()

    # =======================
    # SHEET 1 - TRANSACTION LINES
    # =======================
    sheet = workbook.active
    sheet.title = "Transactions"

    sheet.append([
        "Date",
        "Transaction ID",
        "Customer",
        "Product",
        "Quantity",
        "Unit Price",
        "Line Total",
        "Transaction Total",
    ])

    for transaction in transactions:
        for line in transaction.items:
            sheet.append([
                to_store_time(transaction.date).strftime("%Y-%m-%d %H:%M"),
                transaction.id,
                transaction.customer_name or "",
                line["name"],
                int(line["quantity"]),
                float(to_money(line["price"])),
                float(line_total(line)),
                float(transaction.total),
            ])

    # =======================
    # SHEET 2 - SUMMARY
    # =======================
    sheet = workbook.create_sheet(title="Summary")

    sheet.append(["Store", store_name])
    sheet.append([
        "Period",
        f"{summary['start_date'] or 'All time'} to {summary['end_date'] or 'today'}",
    ])
    sheet.append([])
    sheet.append(["Total Revenue", float(summary["total_revenue"])])
    sheet.append(["Cost of Goods Sold", float(summary["total_cogs"])])
    sheet.append(["Gross Profit", float(summary["gross_profit"])])
    sheet.append(["Transactions", summary["total_transactions"]])
    sheet.append(["Items Sold", summary["total_items_sold"]])
    sheet.append(["Average Order Value", float(summary["average_order_value"])])

    # =======================
    # RETURN FILE
    # =======================
    output = BytesIO()
    workbook.save(output)
    output.seek(0)

    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
