import unittest
from decimal import Decimal

from stockledger.core.reconciliation import (
    StockSummary,
    compute_profit,
    compute_sales_amount,
    compute_shortage_loss,
    compute_stock_value,
    compute_summary,
    compute_units_sold,
    compute_variance,
)
from tests.support import row


class StockProfitTest(unittest.TestCase):
    def test_counted_shortage_scenario(self):
        entry = row(opening_stock=100, closing_stock=85, actual_stock=80, price=10, cost_price=6)
        self.assertEqual(compute_units_sold(entry), 15)
        self.assertEqual(compute_sales_amount(entry), Decimal("150"))
        self.assertEqual(compute_profit(entry), Decimal("60"))
        self.assertEqual(compute_shortage_loss(entry), Decimal("30"))

    def test_profit_matches_formula(self):
        cases = [
            (10, 4, "2.50", "1.75"),
            (7, 7, "99.99", "50"),
            (3, 9, "12", "8"),
            (50, 0, "0.10", None),
        ]
        for opening, closing, price, cost in cases:
            with self.subTest(opening=opening, closing=closing):
                entry = row(opening_stock=opening, closing_stock=closing, price=price, cost_price=cost)
                sold = opening - closing
                expected = sold * Decimal(price) - sold * Decimal(cost or "0")
                self.assertEqual(compute_profit(entry), expected)

    def test_negative_units_sold_is_kept(self):
        entry = row(opening_stock=5, closing_stock=8, price=10, cost_price=6)
        self.assertEqual(compute_units_sold(entry), -3)
        self.assertEqual(compute_profit(entry), Decimal("-12"))

    def test_missing_cost_price_counts_as_zero(self):
        entry = row(opening_stock=10, closing_stock=6, actual_stock=2, price=15, cost_price=None)
        self.assertEqual(compute_profit(entry), Decimal("60"))
        self.assertEqual(compute_shortage_loss(entry), Decimal("0"))

    def test_missing_numbers_default_to_zero(self):
        entry = {"opening_stock": None, "closing_stock": "abc", "price": "n/a"}
        self.assertEqual(compute_units_sold(entry), 0)
        self.assertEqual(compute_profit(entry), Decimal("0"))
        self.assertEqual(compute_shortage_loss(entry), Decimal("0"))

    def test_float_inputs_do_not_leak_binary_error(self):
        entry = row(opening_stock=3, closing_stock=0, price=0.1, cost_price=0.0)
        self.assertEqual(compute_sales_amount(entry), Decimal("0.3"))


class ShortageLossTest(unittest.TestCase):
    def test_uncounted_row_has_no_loss(self):
        for closing in (0, 5, 500):
            with self.subTest(closing=closing):
                entry = row(opening_stock=600, closing_stock=closing, actual_stock=None)
                self.assertEqual(compute_shortage_loss(entry), Decimal("0"))

    def test_surplus_is_not_a_credit(self):
        entry = row(closing_stock=10, actual_stock=14, cost_price=6)
        self.assertEqual(compute_shortage_loss(entry), Decimal("0"))

    def test_exact_count_has_no_loss(self):
        entry = row(closing_stock=10, actual_stock=10, cost_price=6)
        self.assertEqual(compute_shortage_loss(entry), Decimal("0"))

    def test_zero_count_is_a_count(self):
        entry = row(closing_stock=4, actual_stock=0, cost_price="2.25")
        self.assertEqual(compute_shortage_loss(entry), Decimal("9.00"))

    def test_variance_and_value(self):
        counted = row(closing_stock=10, actual_stock=7, cost_price=6)
        uncounted = row(closing_stock=10, actual_stock=None, cost_price=6)
        self.assertEqual(compute_variance(counted), -3)
        self.assertIsNone(compute_variance(uncounted))
        self.assertEqual(compute_stock_value(counted), Decimal("42"))
        self.assertEqual(compute_stock_value(uncounted), Decimal("60"))


class StockSummaryTest(unittest.TestCase):
    def setUp(self):
        self.first = [
            row(opening_stock=100, closing_stock=85, actual_stock=80, price=10, cost_price=6),
            row(opening_stock=20, closing_stock=5, actual_stock=None, price="20", cost_price="12.50"),
        ]
        self.second = [
            row(opening_stock=5, closing_stock=8, actual_stock=6, price=15, cost_price=None),
        ]

    def test_empty_input(self):
        self.assertEqual(compute_summary([]), StockSummary())
        self.assertEqual(compute_summary([]).total_sold, 0)

    def test_totals(self):
        summary = compute_summary(self.first)
        self.assertEqual(summary.total_sold, 30)
        self.assertEqual(summary.total_sales, Decimal("450"))
        self.assertEqual(summary.total_profit, Decimal("172.50"))
        self.assertEqual(summary.total_product_loss, Decimal("30"))

    def test_additive(self):
        combined = compute_summary(self.first + self.second)
        self.assertEqual(combined, compute_summary(self.first) + compute_summary(self.second))

    def test_many_small_amounts_stay_exact(self):
        entries = [row(opening_stock=1, closing_stock=0, price="0.10", cost_price="0.07")] * 1000
        summary = compute_summary(entries)
        self.assertEqual(summary.total_sales, Decimal("100.00"))
        self.assertEqual(summary.total_profit, Decimal("30.00"))

    def test_as_dict_rounds_to_cents(self):
        summary = StockSummary(total_sold=1, total_sales=Decimal("1.005"))
        self.assertEqual(summary.as_dict()["total_sales"], Decimal("1.01"))


if __name__ == "__main__":
    unittest.main()
