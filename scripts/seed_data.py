import argparse
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import delete, select

from stockledger.core.logging import setup_logging
from stockledger.database import Base, SessionLocal, engine
from stockledger.models import Product, ReorderPoint, StockEntry, Store, import_all_models


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample stores, products and stock days.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=7,
        help="How many trailing stock days to create.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if args.reset:
            db.execute(delete(ReorderPoint))
            db.execute(delete(StockEntry))
            db.execute(delete(Product))
            db.execute(delete(Store))
            db.commit()

        has_store = db.execute(select(Store.id).limit(1)).first()
        if has_store:
            print("Seed skipped: stores already exist.")
            return

        stores = [
            Store(id=1, name="Main Street Cafe", city="Pune"),
            Store(id=2, name="Station Kiosk", city="Pune"),
        ]
        products = [
            Product(id=1, name="Masala Chai", category="drinks", price=Decimal("20.00"), cost_price=Decimal("7.50")),
            Product(id=2, name="Filter Coffee", category="drinks", price=Decimal("35.00"), cost_price=Decimal("12.00")),
            Product(id=3, name="Veg Puff", category="bakery", price=Decimal("25.00"), cost_price=Decimal("14.00")),
            Product(id=4, name="Banana Chips", category="snacks", price=Decimal("30.00"), cost_price=None),
        ]
        db.add_all(stores + products)
        db.flush()

        start = date.today() - timedelta(days=max(1, args.days) - 1)
        for store in stores:
            for product in products:
                on_hand = 40
                for offset in range(max(1, args.days)):
                    sold = 3 + (product.id * 2 + offset + store.id) % 9
                    added = 20 if offset % 3 == 2 else 0
                    closing = max(0, on_hand + added - sold)
                    # every fourth day the count comes up one short
                    actual = closing - 1 if offset % 4 == 3 and closing else closing
                    db.add(
                        StockEntry(
                            product_id=product.id,
                            shop_id=store.id,
                            stock_date=start + timedelta(days=offset),
                            opening_stock=on_hand,
                            closing_stock=closing,
                            stock_added=added,
                            actual_stock=actual,
                            operator_name="seed",
                        )
                    )
                    on_hand = actual
                db.add(ReorderPoint(product_id=product.id, shop_id=store.id, minimum_stock=10))
        db.commit()
        print("Seed data created.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
