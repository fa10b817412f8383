from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from stockledger.core.reconciliation import (
    ZERO,
    as_decimal,
    compute_shortage_loss,
    compute_stock_value,
    compute_units_sold,
    compute_variance,
    on_hand_units,
    quantize_money,
)
from stockledger.models.reorder_point import ReorderPoint
from stockledger.services.stock_repository import fetch_rows_for_date


def stock_value_report(db: Session, stock_date: date) -> dict:
    """Value the day's stock at cost, per row and in total."""
    items = []
    total_current = ZERO
    total_sold = ZERO
    total_added = ZERO
    total_loss = ZERO
    uncosted_shortage_units = 0

    for row in fetch_rows_for_date(db, stock_date):
        cost = as_decimal(row.cost_price)
        sold_units = max(0, compute_units_sold(row))
        value = compute_stock_value(row)
        loss = compute_shortage_loss(row)
        variance = compute_variance(row)
        # A missing cost hides shrinkage from the loss total; keep the units visible.
        if row.cost_price is None and variance is not None and variance < 0:
            uncosted_shortage_units += -variance

        items.append(
            {
                "stock_id": row.id,
                "product_id": row.product_id,
                "product_name": row.product_name,
                "shop_id": row.shop_id,
                "store_name": row.store_name,
                "current_stock": on_hand_units(row),
                "cost_price": quantize_money(cost),
                "value": quantize_money(value),
                "sold_units": sold_units,
                "sold_value": quantize_money(sold_units * cost),
                "added_units": row.stock_added or 0,
                "added_value": quantize_money((row.stock_added or 0) * cost),
                "variance": variance,
                "shortage_loss": quantize_money(loss),
            }
        )
        total_current += value
        total_sold += sold_units * cost
        total_added += (row.stock_added or 0) * cost
        total_loss += loss

    items.sort(key=lambda item: item["value"], reverse=True)
    return {
        "stock_date": stock_date,
        "count": len(items),
        "items": items,
        "total_current_value": quantize_money(total_current),
        "total_sold_value": quantize_money(total_sold),
        "total_added_value": quantize_money(total_added),
        "total_shortage_loss": quantize_money(total_loss),
        "uncosted_shortage_units": uncosted_shortage_units,
    }


def low_stock_items(db: Session, stock_date: date) -> list[dict]:
    """Rows at or below their reorder point; pairs without one are never flagged."""
    minimums = {
        (point.product_id, point.shop_id): point.minimum_stock
        for point in db.execute(select(ReorderPoint)).scalars()
    }
    if not minimums:
        return []

    results = []
    for row in fetch_rows_for_date(db, stock_date):
        minimum = minimums.get((row.product_id, row.shop_id))
        if minimum is None:
            continue
        current = on_hand_units(row)
        if current > minimum:
            continue
        results.append(
            {
                "stock_id": row.id,
                "product_id": row.product_id,
                "product_name": row.product_name or "Unknown Product",
                "shop_id": row.shop_id,
                "store_name": row.store_name or "Unknown Store",
                "current_stock": current,
                "minimum_stock": minimum,
            }
        )
    return results


__all__ = ["low_stock_items", "stock_value_report"]
