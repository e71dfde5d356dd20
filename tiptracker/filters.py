from datetime import date

from .utils import parse_date

RANGE_KEYS = ("7d", "30d", "all")
RANGE_DAYS = {"7d": 7, "30d": 30}


def _date_of(record):
    value = record.get("date") if isinstance(record, dict) else getattr(record, "date", None)
    try:
        return parse_date(value)
    except ValueError:
        return None


def filter_by_range(records, range_key="all", today=None):
    """
    Keep shifts dated within the last 7 / 30 days of `today` (inclusive),
    or everything for "all".
    """
    if range_key not in RANGE_KEYS:
        raise ValueError(f"range must be one of {RANGE_KEYS}, got {range_key!r}")
    if range_key == "all":
        return list(records)

    today = parse_date(today) if today else date.today()
    limit = RANGE_DAYS[range_key]

    kept = []
    for r in records:
        d = _date_of(r)
        if d is not None and (today - d).days <= limit:
            kept.append(r)
    return kept


def filter_by_shift_type(records, shift="all"):
    if shift == "all":
        return list(records)
    return [
        r for r in records
        if ((r.get("shift_type") if isinstance(r, dict) else getattr(r, "shift_type", None)) or "") == shift
    ]


def filter_by_date_span(records, start, end):
    """Shifts with start <= date < end."""
    start, end = parse_date(start), parse_date(end)
    kept = []
    for r in records:
        d = _date_of(r)
        if d is not None and start <= d < end:
            kept.append(r)
    return kept
