"""Profit and shortage figures derived from daily stock rows.

A stock row is anything exposing ``opening_stock``, ``closing_stock``,
``actual_stock``, ``stock_added``, ``price`` and ``cost_price`` either as
attributes or as mapping keys. Missing or unparseable numbers count as zero so
totals stay computable; nothing in here raises on bad row data.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
_CENT = Decimal("0.01")


def field_value(entry, name, default=None):
    if entry is None:
        return default
    if isinstance(entry, Mapping):
        value = entry.get(name, default)
    else:
        value = getattr(entry, name, default)
    return default if value is None else value


def as_decimal(value) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not number.is_finite():
        return ZERO
    return number


def as_int(value) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    return int(as_decimal(value))


def optional_int(value):
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return int(number)


def quantize_money(value) -> Decimal:
    return as_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def _price(entry) -> Decimal:
    return as_decimal(field_value(entry, "price"))


def _cost_price(entry) -> Decimal:
    return as_decimal(field_value(entry, "cost_price"))


def _actual_stock(entry):
    return optional_int(field_value(entry, "actual_stock"))


def compute_units_sold(entry) -> int:
    # Not clamped: closing above opening is a stock correction day.
    return as_int(field_value(entry, "opening_stock")) - as_int(field_value(entry, "closing_stock"))


def compute_sales_amount(entry) -> Decimal:
    return compute_units_sold(entry) * _price(entry)


def compute_profit(entry) -> Decimal:
    sold = compute_units_sold(entry)
    return sold * _price(entry) - sold * _cost_price(entry)


def compute_shortage_loss(entry) -> Decimal:
    """Value missing units at cost; a surplus never turns into a credit."""
    actual = _actual_stock(entry)
    if actual is None:
        return ZERO
    missing_units = as_int(field_value(entry, "closing_stock")) - actual
    if missing_units <= 0:
        return ZERO
    return missing_units * _cost_price(entry)


def compute_variance(entry):
    actual = _actual_stock(entry)
    if actual is None:
        return None
    return actual - as_int(field_value(entry, "closing_stock"))


def on_hand_units(entry) -> int:
    actual = _actual_stock(entry)
    if actual is None:
        actual = as_int(field_value(entry, "closing_stock"))
    return max(0, actual)


def compute_stock_value(entry) -> Decimal:
    return on_hand_units(entry) * _cost_price(entry)


@dataclass(frozen=True)
class StockSummary:
    total_sold: int = 0
    total_sales: Decimal = ZERO
    total_profit: Decimal = ZERO
    total_product_loss: Decimal = ZERO

    def __add__(self, other):
        if not isinstance(other, StockSummary):
            return NotImplemented
        return StockSummary(
            total_sold=self.total_sold + other.total_sold,
            total_sales=self.total_sales + other.total_sales,
            total_profit=self.total_profit + other.total_profit,
            total_product_loss=self.total_product_loss + other.total_product_loss,
        )

    def as_dict(self):
        return {
            "total_sold": self.total_sold,
            "total_sales": quantize_money(self.total_sales),
            "total_profit": quantize_money(self.total_profit),
            "total_product_loss": quantize_money(self.total_product_loss),
        }


def compute_summary(entries) -> StockSummary:
    total_sold = 0
    total_sales = ZERO
    total_profit = ZERO
    total_product_loss = ZERO
    for entry in entries:
        sold = compute_units_sold(entry)
        total_sold += sold
        total_sales += sold * _price(entry)
        total_profit += compute_profit(entry)
        total_product_loss += compute_shortage_loss(entry)
    return StockSummary(
        total_sold=total_sold,
        total_sales=total_sales,
        total_profit=total_profit,
        total_product_loss=total_product_loss,
    )


__all__ = [
    "StockSummary",
    "ZERO",
    "as_decimal",
    "as_int",
    "compute_profit",
    "compute_sales_amount",
    "compute_shortage_loss",
    "compute_stock_value",
    "compute_summary",
    "compute_units_sold",
    "compute_variance",
    "field_value",
    "on_hand_units",
    "optional_int",
    "quantize_money",
]
