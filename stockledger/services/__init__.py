from stockledger.services.stock_query_service import (
    StockQuery,
    StockQueryService,
    get_stock_query_service,
    handle_sort_change,
)
from stockledger.services.stock_service import (
    adjust_stock_for_bill,
    carry_forward_stock,
    edit_stock_entry,
    record_actual_stock,
)
from stockledger.services.stock_value_service import low_stock_items, stock_value_report

__all__ = [
    "StockQuery",
    "StockQueryService",
    "adjust_stock_for_bill",
    "carry_forward_stock",
    "edit_stock_entry",
    "get_stock_query_service",
    "handle_sort_change",
    "low_stock_items",
    "record_actual_stock",
    "stock_value_report",
]
