from datetime import date
from decimal import Decimal

from sqlalchemy.orm import sessionmaker

from stockledger.database.base import Base
from stockledger.database.engine import build_engine
from stockledger.models import Product, ReorderPoint, StockEntry, Store, import_all_models


def make_session_factory():
    engine = build_engine("sqlite:///:memory:")
    import_all_models()
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def seed_catalog(db):
    db.add_all(
        [
            Store(id=1, name="Main Street", city="Pune"),
            Store(id=2, name="Station Kiosk", city="Pune"),
            Product(id=1, name="Diet Cola", category="drinks", price=Decimal("10.00"), cost_price=Decimal("6.00")),
            Product(id=2, name="Chips", category="snacks", price=Decimal("20.00"), cost_price=Decimal("12.50")),
            Product(id=3, name="Masala Chai", category="drinks", price=Decimal("15.00"), cost_price=None),
        ]
    )
    db.commit()


def add_stock(db, product_id, shop_id, stock_date, opening, closing, actual=None, added=0, operator=None):
    entry = StockEntry(
        product_id=product_id,
        shop_id=shop_id,
        stock_date=stock_date,
        opening_stock=opening,
        closing_stock=closing,
        stock_added=added,
        actual_stock=actual,
        operator_name=operator,
    )
    db.add(entry)
    db.commit()
    return entry


def add_reorder_point(db, product_id, shop_id, minimum_stock):
    db.add(ReorderPoint(product_id=product_id, shop_id=shop_id, minimum_stock=minimum_stock))
    db.commit()


def row(**overrides):
    values = {
        "id": 1,
        "product_id": 1,
        "shop_id": 1,
        "stock_date": date(2026, 1, 1),
        "opening_stock": 0,
        "closing_stock": 0,
        "stock_added": 0,
        "actual_stock": None,
        "operator_name": None,
        "product_name": "Diet Cola",
        "store_name": "Main Street",
        "price": Decimal("10"),
        "cost_price": Decimal("6"),
    }
    values.update(overrides)
    return values
