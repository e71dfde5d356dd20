import math
import re
from datetime import date, datetime, timedelta
from dateutil import parser as date_parser

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
START_OF_WEEK_CHOICES = ("sun", "mon")

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
# longest leading float, e.g. "1.234.50" -> "1.234"
_FLOAT_PREFIX = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def to_number(value):
    """
    Coerce a number-ish value ("$1,234", " 5,0 ", None, 12.5) into a finite float.

    Anything that cannot be read as a number becomes 0. Only the first comma
    is treated as a decimal separator; every other non-digit character
    except "." and "-" is stripped before parsing.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return float(value) if math.isfinite(value) else 0.0
        except OverflowError:
            return 0.0

    text = str(value).strip()
    if not text:
        return 0.0

    text = text.replace(",", ".", 1)
    text = _NON_NUMERIC.sub("", text)
    if text.endswith("."):
        text = text[:-1]

    m = _FLOAT_PREFIX.match(text)
    if not m:
        return 0.0
    n = float(m.group(0))
    return n if math.isfinite(n) else 0.0


def round2(value):
    """Round to cents, halves away from zero."""
    n = to_number(value)
    cents = math.floor(abs(n) * 100 + 0.5)
    return (-cents if n < 0 else cents) / 100


def is_iso_date(text):
    if not isinstance(text, str) or not ISO_DATE_RE.match(text):
        return False
    try:
        date_parser.isoparse(text)
    except ValueError:
        return False
    return True


def parse_date(value):
    """Accepts a date, datetime or YYYY-MM-DD string and returns a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_RE.match(value.strip()):
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    return date_parser.isoparse(value.strip()).date()


def day_of_week(value):
    """Day label for a date, Sun..Sat."""
    return DAY_NAMES[parse_date(value).isoweekday() % 7]


def start_of_week(value, week_start="sun"):
    if week_start not in START_OF_WEEK_CHOICES:
        raise ValueError(f"start of week must be one of {START_OF_WEEK_CHOICES}, got {week_start!r}")

    d = parse_date(value)
    if week_start == "sun":
        offset = d.isoweekday() % 7
    else:
        offset = d.weekday()
    return d - timedelta(days=offset)


def get_week_bounds(date_str=None, week_start="sun"):
    """
    Returns (start, end) ISO dates for the week containing `date_str`
    (today if None). `end` is exclusive.
    """
    target = parse_date(date_str) if date_str else date.today()
    start = start_of_week(target, week_start)
    end = start + timedelta(days=7)
    return start.isoformat(), end.isoformat()
