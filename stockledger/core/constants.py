SORT_FIELDS = ("date", "units_sold", "sales_amount", "profit", "product_loss")
SORT_FIELD_ALIASES = {"stock_date": "date"}
SORT_DIRECTIONS = ("asc", "desc")
DEFAULT_SORT_FIELD = "date"
DEFAULT_SORT_DIRECTION = "desc"

# Filter values that mean "no filter" on store/product drop-downs.
ALL_SENTINELS = ("", "all", "_all")

ADJUSTMENT_TYPES = ("sale", "return")

CACHE_STOCKS = "stocks"
CACHE_PRODUCTS = "products"
CACHE_POS = "pos"
CACHE_POS_PRODUCTS = "pos-products"
CACHE_PRODUCT_STOCK_MANAGEMENT = "product-stock-management"
CACHE_ASSIGNED_PRODUCTS = "assigned-products"
CACHE_LOW_STOCK = "low-stock-alerts"
CACHE_STOCK_VALUE = "stock-value"

CACHE_KEYS = (
    CACHE_STOCKS,
    CACHE_PRODUCTS,
    CACHE_POS,
    CACHE_POS_PRODUCTS,
    CACHE_PRODUCT_STOCK_MANAGEMENT,
    CACHE_ASSIGNED_PRODUCTS,
    CACHE_LOW_STOCK,
    CACHE_STOCK_VALUE,
)

_STOCK_VIEWS = (
    CACHE_STOCKS,
    CACHE_POS_PRODUCTS,
    CACHE_PRODUCT_STOCK_MANAGEMENT,
    CACHE_ASSIGNED_PRODUCTS,
    CACHE_LOW_STOCK,
    CACHE_STOCK_VALUE,
)

MUTATION_CACHE_KEYS = {
    "stock_edit": _STOCK_VIEWS,
    "sale": _STOCK_VIEWS + (CACHE_POS,),
    "import": _STOCK_VIEWS + (CACHE_PRODUCTS, CACHE_POS),
    "carry_forward": _STOCK_VIEWS,
}
