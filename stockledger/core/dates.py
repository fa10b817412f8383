from datetime import date, datetime, timedelta


def normalize_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        try:
            return date.fromisoformat(value_text[:10])
        except ValueError:
            return None
    return None


def resolve_date_range(date_from=None, date_to=None, *, lookback_days=30, today=None):
    """Return ``(date_from, date_to)`` with the trailing-window defaults applied.

    A missing end defaults to today, a missing start to ``lookback_days``
    before the end. Swapped bounds are put back in order.
    """
    end = normalize_date(date_to) or today or date.today()
    start = normalize_date(date_from) or (end - timedelta(days=lookback_days))
    if start > end:
        start, end = end, start
    return start, end
