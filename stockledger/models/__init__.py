import importlib

from stockledger.models.product import Product
from stockledger.models.reorder_point import ReorderPoint
from stockledger.models.stock import StockEntry
from stockledger.models.stores import Store


def import_all_models() -> None:
    for module_name in (
        "stockledger.models.product",
        "stockledger.models.reorder_point",
        "stockledger.models.stock",
        "stockledger.models.stores",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Product",
    "ReorderPoint",
    "StockEntry",
    "Store",
    "import_all_models",
]
