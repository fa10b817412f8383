from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from stockledger.core.reconciliation import (
    compute_profit,
    compute_sales_amount,
    compute_shortage_loss,
    compute_units_sold,
    quantize_money,
)


class StockEntryRead(BaseModel):
    id: int
    product_id: int
    shop_id: int
    stock_date: date
    opening_stock: int
    closing_stock: int
    stock_added: int
    actual_stock: Optional[int] = None
    operator_name: Optional[str] = None
    product_name: Optional[str] = None
    store_name: Optional[str] = None
    price: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None

    model_config = ConfigDict(from_attributes=True)


class StockEntryReport(StockEntryRead):
    units_sold: int
    sales_amount: Decimal
    profit: Decimal
    product_loss: Decimal

    @classmethod
    def from_row(cls, row):
        base = StockEntryRead.model_validate(row).model_dump()
        return cls(
            **base,
            units_sold=compute_units_sold(row),
            sales_amount=quantize_money(compute_sales_amount(row)),
            profit=quantize_money(compute_profit(row)),
            product_loss=quantize_money(compute_shortage_loss(row)),
        )


class StockSummaryRead(BaseModel):
    total_sold: int = 0
    total_sales: Decimal = Decimal("0.00")
    total_profit: Decimal = Decimal("0.00")
    total_product_loss: Decimal = Decimal("0.00")


class StockPage(BaseModel):
    entries: List[StockEntryReport] = Field(default_factory=list)
    filtered_count: int = 0
    total_count: int = 0
    page: int = 1
    page_size: int
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    sort_field: str
    sort_direction: str
    summary: StockSummaryRead = Field(default_factory=StockSummaryRead)
    error: Optional[str] = None


class BillItem(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class BillAdjustmentRequest(BaseModel):
    shop_id: int
    adjustment_type: Literal["sale", "return"] = "sale"
    items: List[BillItem] = Field(min_length=1)
    stock_date: Optional[date] = None


class ActualStockUpdate(BaseModel):
    product_id: int
    shop_id: int
    actual_stock: int = Field(ge=0)
    stock_date: Optional[date] = None


class StockEntryEdit(BaseModel):
    opening_stock: Optional[int] = Field(None, ge=0)
    stock_added: Optional[int] = Field(None, ge=0)
    actual_stock: Optional[int] = Field(None, ge=0)
    clear_actual: bool = False
    operator_name: Optional[str] = None


class CarryForwardRequest(BaseModel):
    target_date: Optional[date] = None


class CarryForwardResult(BaseModel):
    target_date: date
    created: int


class FilterOption(BaseModel):
    id: int
    name: str


class FilterOptions(BaseModel):
    shops: List[FilterOption] = Field(default_factory=list)
    products: List[FilterOption] = Field(default_factory=list)


class LowStockItem(BaseModel):
    stock_id: int
    product_id: int
    product_name: str
    shop_id: int
    store_name: str
    current_stock: int
    minimum_stock: int
