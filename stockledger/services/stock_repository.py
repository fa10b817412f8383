from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from stockledger.models.product import Product
from stockledger.models.stock import StockEntry
from stockledger.models.stores import Store


@dataclass(frozen=True)
class StockRow:
    """A stock entry joined with its product price/cost and store name."""

    id: int
    product_id: int
    shop_id: int
    stock_date: date
    opening_stock: int
    closing_stock: int
    stock_added: int
    actual_stock: Optional[int]
    operator_name: Optional[str]
    product_name: Optional[str]
    price: Optional[Decimal]
    cost_price: Optional[Decimal]
    store_name: Optional[str]


def _stock_row_select():
    return (
        select(
            StockEntry.id,
            StockEntry.product_id,
            StockEntry.shop_id,
            StockEntry.stock_date,
            StockEntry.opening_stock,
            StockEntry.closing_stock,
            StockEntry.stock_added,
            StockEntry.actual_stock,
            StockEntry.operator_name,
            Product.name.label("product_name"),
            Product.price.label("price"),
            Product.cost_price.label("cost_price"),
            Store.name.label("store_name"),
        )
        .select_from(StockEntry)
        .outerjoin(Product, Product.id == StockEntry.product_id)
        .outerjoin(Store, Store.id == StockEntry.shop_id)
    )


def fetch_stock_rows(
    db: Session,
    date_from: date,
    date_to: date,
    *,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
) -> tuple[list[StockRow], int]:
    """Rows dated within ``[date_from, date_to]``, newest day first.

    Pagination is applied only when both ``page`` and ``page_size`` are given;
    the returned count is always the size of the whole range.
    """
    in_range = (
        StockEntry.stock_date >= date_from,
        StockEntry.stock_date <= date_to,
    )
    stmt = (
        _stock_row_select()
        .where(*in_range)
        .order_by(StockEntry.stock_date.desc(), StockEntry.id)
    )
    if page and page_size:
        stmt = stmt.offset((page - 1) * page_size).limit(page_size)

    rows = [StockRow(**dict(row)) for row in db.execute(stmt).mappings()]
    total_count = db.scalar(select(func.count(StockEntry.id)).where(*in_range)) or 0
    return rows, total_count


def fetch_rows_for_date(db: Session, stock_date: date) -> list[StockRow]:
    stmt = (
        _stock_row_select()
        .where(StockEntry.stock_date == stock_date)
        .order_by(Store.name, Product.name, StockEntry.id)
    )
    return [StockRow(**dict(row)) for row in db.execute(stmt).mappings()]


def get_stock_entry(db: Session, product_id: int, shop_id: int, stock_date: date):
    return (
        db.execute(
            select(StockEntry).where(
                StockEntry.product_id == product_id,
                StockEntry.shop_id == shop_id,
                StockEntry.stock_date == stock_date,
            )
        )
        .scalars()
        .first()
    )


def get_latest_entry_before(db: Session, product_id: int, shop_id: int, stock_date: date):
    return (
        db.execute(
            select(StockEntry)
            .where(
                StockEntry.product_id == product_id,
                StockEntry.shop_id == shop_id,
                StockEntry.stock_date < stock_date,
            )
            .order_by(StockEntry.stock_date.desc())
            .limit(1)
        )
        .scalars()
        .first()
    )


def list_entries_for_date(db: Session, stock_date: date) -> list[StockEntry]:
    return list(
        db.execute(
            select(StockEntry)
            .where(StockEntry.stock_date == stock_date)
            .order_by(StockEntry.id)
        )
        .scalars()
        .all()
    )


def load_filter_options(db: Session) -> dict:
    stores = db.execute(select(Store.id, Store.name).order_by(Store.name)).mappings().all()
    products = db.execute(select(Product.id, Product.name).order_by(Product.name)).mappings().all()
    return {
        "shops": [dict(row) for row in stores],
        "products": [dict(row) for row in products],
    }


def to_stock_row(entry: StockEntry) -> StockRow:
    product = entry.product
    store = entry.store
    return StockRow(
        id=entry.id,
        product_id=entry.product_id,
        shop_id=entry.shop_id,
        stock_date=entry.stock_date,
        opening_stock=entry.opening_stock,
        closing_stock=entry.closing_stock,
        stock_added=entry.stock_added,
        actual_stock=entry.actual_stock,
        operator_name=entry.operator_name,
        product_name=product.name if product is not None else None,
        price=product.price if product is not None else None,
        cost_price=product.cost_price if product is not None else None,
        store_name=store.name if store is not None else None,
    )


__all__ = [
    "StockRow",
    "fetch_rows_for_date",
    "fetch_stock_rows",
    "get_latest_entry_before",
    "get_stock_entry",
    "list_entries_for_date",
    "load_filter_options",
    "to_stock_row",
]
