import unittest
from datetime import date
from decimal import Decimal

from stockledger.services.stock_value_service import low_stock_items, stock_value_report
from tests.support import add_reorder_point, add_stock, make_session_factory, seed_catalog

DAY = date(2026, 4, 2)


class StockValueReportTest(unittest.TestCase):
    def setUp(self):
        self.Session = make_session_factory()
        self.db = self.Session()
        seed_catalog(self.db)
        # cola: 10 counted at cost 6; chips: 4 expected at cost 12.50; chai: short 3, no cost
        add_stock(self.db, 1, 1, DAY, opening=15, closing=12, actual=10, added=2)
        add_stock(self.db, 2, 1, DAY, opening=6, closing=4)
        add_stock(self.db, 3, 2, DAY, opening=9, closing=8, actual=5)
        add_stock(self.db, 1, 2, date(2026, 4, 1), opening=99, closing=99)

    def tearDown(self):
        self.db.close()

    def test_totals(self):
        report = stock_value_report(self.db, DAY)
        self.assertEqual(report["count"], 3)
        self.assertEqual(report["total_current_value"], Decimal("110.00"))
        self.assertEqual(report["total_sold_value"], Decimal("43.00"))
        self.assertEqual(report["total_added_value"], Decimal("12.00"))
        self.assertEqual(report["total_shortage_loss"], Decimal("12.00"))
        self.assertEqual(report["uncosted_shortage_units"], 3)

    def test_items_ordered_by_value(self):
        report = stock_value_report(self.db, DAY)
        self.assertEqual(
            [item["product_name"] for item in report["items"]],
            ["Diet Cola", "Chips", "Masala Chai"],
        )
        self.assertEqual(report["items"][0]["variance"], -2)

    def test_empty_day(self):
        report = stock_value_report(self.db, date(2026, 1, 1))
        self.assertEqual(report["count"], 0)
        self.assertEqual(report["total_current_value"], Decimal("0.00"))


class LowStockTest(unittest.TestCase):
    def setUp(self):
        self.Session = make_session_factory()
        self.db = self.Session()
        seed_catalog(self.db)
        add_stock(self.db, 1, 1, DAY, opening=15, closing=12, actual=3)
        add_stock(self.db, 2, 1, DAY, opening=6, closing=5)
        add_stock(self.db, 3, 2, DAY, opening=1, closing=0)

    def tearDown(self):
        self.db.close()

    def test_no_reorder_points(self):
        self.assertEqual(low_stock_items(self.db, DAY), [])

    def test_flags_rows_at_or_below_minimum(self):
        add_reorder_point(self.db, 1, 1, 5)
        add_reorder_point(self.db, 2, 1, 5)
        items = low_stock_items(self.db, DAY)
        self.assertEqual(
            [(item["product_name"], item["current_stock"], item["minimum_stock"]) for item in items],
            [("Chips", 5, 5), ("Diet Cola", 3, 5)],
        )


if __name__ == "__main__":
    unittest.main()
