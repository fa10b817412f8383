import logging
from datetime import date, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockledger.core.constants import ADJUSTMENT_TYPES
from stockledger.core.context import RequestContext
from stockledger.core.invalidation import get_invalidation_bus
from stockledger.core.reconciliation import field_value, optional_int
from stockledger.models.product import Product
from stockledger.models.stock import StockEntry
from stockledger.models.stores import Store
from stockledger.services.stock_repository import (
    get_latest_entry_before,
    get_stock_entry,
    list_entries_for_date,
)

logger = logging.getLogger(__name__)


def carried_stock(entry) -> int:
    """Units that roll over to the next day: the count if taken, else the expected closing."""
    if entry is None:
        return 0
    value = entry.actual_stock if entry.actual_stock is not None else entry.closing_stock
    return max(0, value or 0)


def _require_count(value, name):
    number = optional_int(value)
    if number is None or number < 0:
        raise ValueError("{} must be a non-negative integer.".format(name))
    return number


def _require_refs(db: Session, product_id, shop_id):
    if db.get(Product, product_id) is None:
        raise LookupError("Product {} not found.".format(product_id))
    if db.get(Store, shop_id) is None:
        raise LookupError("Store {} not found.".format(shop_id))


def _commit(db: Session, mutation: str, context: RequestContext, bus):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Stock mutation %s failed",
            mutation,
            extra={"mutation": mutation, "operator": context.operator_label},
        )
        raise
    (bus or get_invalidation_bus()).notify_mutation(mutation)


def adjust_stock_for_bill(
    db: Session,
    items,
    shop_id: int,
    adjustment_type: str = "sale",
    *,
    context: RequestContext = None,
    today: date = None,
    bus=None,
) -> list[StockEntry]:
    """Move today's stock for each billed item; a sale removes units, a return adds them.

    ``items`` holds ``product_id``/``quantity`` pairs as mappings or objects.
    Counts never drop below zero.
    """
    if adjustment_type not in ADJUSTMENT_TYPES:
        raise ValueError("adjustment_type must be one of: {}".format(", ".join(ADJUSTMENT_TYPES)))
    context = context or RequestContext()
    today = today or date.today()

    touched = []
    for item in items:
        product_id = field_value(item, "product_id")
        quantity = _require_count(field_value(item, "quantity"), "quantity")
        _require_refs(db, product_id, shop_id)
        adjustment = -quantity if adjustment_type == "sale" else quantity

        entry = get_stock_entry(db, product_id, shop_id, today)
        if entry is not None:
            current_actual = entry.actual_stock if entry.actual_stock is not None else entry.closing_stock
            entry.actual_stock = max(0, current_actual + adjustment)
            entry.closing_stock = max(0, entry.closing_stock + adjustment)
        else:
            remaining = 0 if adjustment_type == "sale" else quantity
            entry = StockEntry(
                product_id=product_id,
                shop_id=shop_id,
                stock_date=today,
                opening_stock=remaining,
                closing_stock=remaining,
                actual_stock=remaining,
                stock_added=quantity if adjustment_type == "return" else 0,
                operator_name=context.operator_name,
            )
            db.add(entry)
            # autoflush is off; flush so a repeated product in the same bill finds this row
            db.flush()
        touched.append(entry)

    _commit(db, "sale", context, bus)
    logger.info(
        "Applied %s adjustment for %d item(s) in store %s",
        adjustment_type,
        len(touched),
        shop_id,
        extra={"operator": context.operator_label, "shop_id": shop_id},
    )
    return touched


def record_actual_stock(
    db: Session,
    product_id: int,
    shop_id: int,
    actual_stock,
    *,
    context: RequestContext = None,
    stock_date: date = None,
    bus=None,
) -> StockEntry:
    """Store a physical count without touching the expected closing figure."""
    context = context or RequestContext()
    stock_date = stock_date or date.today()
    counted = _require_count(actual_stock, "actual_stock")
    _require_refs(db, product_id, shop_id)

    entry = get_stock_entry(db, product_id, shop_id, stock_date)
    if entry is not None:
        entry.actual_stock = counted
    else:
        opening = carried_stock(get_latest_entry_before(db, product_id, shop_id, stock_date))
        entry = StockEntry(
            product_id=product_id,
            shop_id=shop_id,
            stock_date=stock_date,
            opening_stock=opening,
            closing_stock=opening,
            stock_added=0,
            actual_stock=counted,
            operator_name=context.operator_name,
        )
        db.add(entry)

    _commit(db, "stock_edit", context, bus)
    return entry


def edit_stock_entry(
    db: Session,
    entry_id: int,
    *,
    opening_stock=None,
    stock_added=None,
    actual_stock=None,
    clear_actual: bool = False,
    operator_name=None,
    context: RequestContext = None,
    bus=None,
) -> StockEntry:
    context = context or RequestContext()
    entry = db.get(StockEntry, entry_id)
    if entry is None:
        raise LookupError("Stock entry {} not found.".format(entry_id))

    # Units that left the shelf so far stay fixed while the inputs change.
    moved_out = entry.opening_stock + entry.stock_added - entry.closing_stock

    if opening_stock is not None:
        entry.opening_stock = _require_count(opening_stock, "opening_stock")
    if stock_added is not None:
        entry.stock_added = _require_count(stock_added, "stock_added")
    if clear_actual:
        entry.actual_stock = None
    elif actual_stock is not None:
        entry.actual_stock = _require_count(actual_stock, "actual_stock")
    if operator_name is not None:
        entry.operator_name = operator_name or None

    entry.closing_stock = max(0, entry.opening_stock + entry.stock_added - moved_out)

    _commit(db, "stock_edit", context, bus)
    return entry


def carry_forward_stock(db: Session, target_date: date, *, bus=None) -> int:
    """Open ``target_date`` for every product/store pair counted the day before.

    Pairs that already have a row on ``target_date`` are left alone.
    """
    previous = target_date - timedelta(days=1)
    created = 0
    for entry in list_entries_for_date(db, previous):
        if get_stock_entry(db, entry.product_id, entry.shop_id, target_date) is not None:
            continue
        opening = carried_stock(entry)
        db.add(
            StockEntry(
                product_id=entry.product_id,
                shop_id=entry.shop_id,
                stock_date=target_date,
                opening_stock=opening,
                closing_stock=opening,
                stock_added=0,
                actual_stock=None,
            )
        )
        created += 1

    if not created:
        logger.info("Carry forward to %s: nothing to open", target_date)
        return 0

    _commit(db, "carry_forward", RequestContext(), bus)
    logger.info(
        "Carry forward to %s: opened %d row(s)",
        target_date,
        created,
        extra={"stock_date": target_date.isoformat()},
    )
    return created


__all__ = [
    "adjust_stock_for_bill",
    "carried_stock",
    "carry_forward_stock",
    "edit_stock_entry",
    "record_actual_stock",
]
