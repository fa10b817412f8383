from datetime import date

from stockledger.core.constants import (
    ALL_SENTINELS,
    DEFAULT_SORT_DIRECTION,
    SORT_DIRECTIONS,
    SORT_FIELD_ALIASES,
    SORT_FIELDS,
)
from stockledger.core.dates import normalize_date
from stockledger.core.reconciliation import (
    compute_profit,
    compute_sales_amount,
    compute_shortage_loss,
    compute_units_sold,
    field_value,
)

_SEARCH_FIELDS = ("product_name", "store_name", "operator_name")


def normalize_id_filter(value):
    """Map the exact "show everything" drop-down values to ``None``."""
    if value is None:
        return None
    text = str(value)
    if text in ALL_SENTINELS:
        return None
    return text


def normalize_sort_field(value):
    if value is None:
        return None
    key = str(value).strip().lower()
    key = SORT_FIELD_ALIASES.get(key, key)
    return key if key in SORT_FIELDS else None


def normalize_direction(value):
    text = str(value or DEFAULT_SORT_DIRECTION).strip().lower()
    return text if text in SORT_DIRECTIONS else DEFAULT_SORT_DIRECTION


def _matches_search(entry, needle):
    if not needle:
        return True
    for name in _SEARCH_FIELDS:
        haystack = field_value(entry, name)
        if haystack and needle in str(haystack).lower():
            return True
    return False


def _matches_id(entry, name, wanted):
    if wanted is None:
        return True
    value = field_value(entry, name)
    return value is not None and str(value) == wanted


def filter_entries(entries, search_term="", store_filter=None, product_filter=None):
    needle = (search_term or "").lower()
    store_id = normalize_id_filter(store_filter)
    product_id = normalize_id_filter(product_filter)
    return [
        entry
        for entry in entries
        if _matches_search(entry, needle)
        and _matches_id(entry, "shop_id", store_id)
        and _matches_id(entry, "product_id", product_id)
    ]


def _date_key(entry):
    return normalize_date(field_value(entry, "stock_date")) or date.min


_SORT_KEYS = {
    "date": _date_key,
    "units_sold": compute_units_sold,
    "sales_amount": compute_sales_amount,
    "profit": compute_profit,
    "product_loss": compute_shortage_loss,
}


def sort_entries(entries, sort_field, direction=DEFAULT_SORT_DIRECTION):
    """Return a new list ordered by ``sort_field``; ties keep input order.

    An unknown field leaves the order untouched.
    """
    field = normalize_sort_field(sort_field)
    if field is None:
        return list(entries)
    # sorted() stays stable with reverse=True, so equal keys keep input order.
    return sorted(
        entries,
        key=_SORT_KEYS[field],
        reverse=normalize_direction(direction) == "desc",
    )


def paginate(entries, page=1, page_size=None):
    if not page_size:
        return list(entries)
    page = max(1, int(page or 1))
    start = (page - 1) * page_size
    return list(entries[start:start + page_size])


__all__ = [
    "filter_entries",
    "normalize_direction",
    "normalize_id_filter",
    "normalize_sort_field",
    "paginate",
    "sort_entries",
]
