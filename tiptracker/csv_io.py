"""
CSV export / import of shifts.

Export writes the raw shift fields followed by five computed columns.
Import accepts the same file (columns matched by name, case-insensitive,
in any order); computed_* and unknown columns are ignored and the metrics
are recomputed on the next export.
"""

import csv
import io
import math
import sqlite3
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

import pandas as pd

from .calculations import compute_shift_metrics
from .models import ShiftInput
from .utils import is_iso_date, to_number

FIELD_COLUMNS = ShiftInput.field_names()
COMPUTED_COLUMNS = [
    "computed_tip_out",
    "computed_net_tips",
    "computed_wages_earned",
    "computed_effective_hourly",
    "computed_shift_gross",
]
HEADERS = ["id", *FIELD_COLUMNS, *COMPUTED_COLUMNS]
IMPORT_MODES = ("append", "replace")


@dataclass
class ParseResult:
    rows: List[ShiftInput] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    header: List[str] = field(default_factory=list)
    skipped: int = 0


def format_cell(value):
    """Plain decimal text for numbers (6.0 -> "6", 1e-07 -> "0.0000001"), "" for None."""
    if value is None:
        return ""
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    return str(value)


def build_csv(records):
    rows = []
    for r in records:
        m = compute_shift_metrics(r)
        data = r.as_dict() if hasattr(r, "as_dict") else dict(r)
        row = [data.get(c) for c in ["id", *FIELD_COLUMNS]]
        row += [m.tip_out, m.net_tips, m.wages_earned, m.effective_hourly, m.shift_gross]
        rows.append([format_cell(v) for v in row])

    df = pd.DataFrame(rows, columns=HEADERS, dtype=object)
    return df.to_csv(index=False, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)


def export_csv(store, path=None):
    """Builds the CSV for every stored shift; writes it to `path` when given."""
    text = build_csv(store.list())
    if path:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    return text


def _optional_number(text):
    if text is None or str(text).strip() == "":
        return None
    return to_number(text)


def _normalize_row(raw, row_number, errors):
    problems = []

    date = raw.get("date", "").strip()
    if not is_iso_date(date):
        problems.append(f'invalid date "{date}" (expected YYYY-MM-DD)')

    hours = _optional_number(raw.get("hours_worked"))
    hours = 0.0 if hours is None else hours
    if hours < 0:
        problems.append("hours_worked must be >= 0")

    basis = raw.get("tip_out_basis", "").strip() or None
    if basis is not None and basis not in ("tips", "sales"):
        problems.append('tip_out_basis must be "tips" or "sales"')

    pct = _optional_number(raw.get("tip_out_percent"))
    if pct is not None and not (0 <= pct <= 100):
        problems.append("tip_out_percent out of range 0..100")

    sales = _optional_number(raw.get("sales"))
    if basis == "sales" and (sales is None or sales < 0):
        problems.append('tip_out_basis is "sales" but sales is missing/invalid')

    if problems:
        errors.extend(f"Row {row_number}: {p}" for p in problems)
        return None

    return ShiftInput(
        date=date,
        shift_type=raw.get("shift_type", "").strip() or None,
        hours_worked=hours,
        cash_tips=_optional_number(raw.get("cash_tips")),
        card_tips=_optional_number(raw.get("card_tips")),
        tip_out_basis=basis,
        tip_out_percent=pct,
        sales=sales,
        tip_out_override_amount=_optional_number(raw.get("tip_out_override_amount")),
        base_hourly_wage=_optional_number(raw.get("base_hourly_wage")),
        notes=raw.get("notes", "").strip() or None,
    )


def parse_csv(text):
    """
    Parses and validates CSV text. Row numbers in errors are 1-based with the
    header as row 1; invalid rows are skipped and counted.
    """
    if not text or not text.strip():
        return ParseResult(errors=["Empty CSV"])

    try:
        width = len(pd.read_csv(io.StringIO(text), nrows=0, engine="python").columns)
        # rows with more cells than the header keep the first `width` cells
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            index_col=False,
            engine="python",
            on_bad_lines=lambda cells: cells[:width],
        )
    except pd.errors.EmptyDataError:
        return ParseResult(errors=["Empty CSV"])
    except pd.errors.ParserError as e:
        return ParseResult(errors=[f"Could not parse CSV: {e}"])

    header = [str(c).replace("\ufeff", "").strip().lower() for c in df.columns]
    result = ParseResult(header=header)

    missing = [c for c in ("date", "hours_worked") if c not in header]
    if missing:
        result.errors.append(f"Missing required columns: {', '.join(missing)}")

    # blank lines come through as empty rows so file line numbers stay aligned
    line = 2 + sum(str(c).count("\n") for c in df.columns)
    for values in df.itertuples(index=False, name=None):
        cells = [v if isinstance(v, str) else "" for v in values]
        row_number = line
        line += 1 + sum(c.count("\n") for c in cells)
        if not any(c.strip() for c in cells):
            continue

        raw = {}
        for col, value in zip(header, cells):
            if col in FIELD_COLUMNS and col not in raw:
                raw[col] = value

        shift = _normalize_row(raw, row_number, result.errors)
        if shift is None:
            result.skipped += 1
        else:
            result.rows.append(shift)

    return result


def import_csv(store, rows, mode="append"):
    """
    Inserts parsed rows. "replace" wipes existing shifts first, but only when
    there is something to import.
    """
    if mode not in IMPORT_MODES:
        raise ValueError(f"mode must be one of {IMPORT_MODES}, got {mode!r}")
    if not rows:
        return {"inserted": 0, "failed": 0}

    if mode == "replace":
        store.delete_all()

    inserted = failed = 0
    for row in rows:
        try:
            store.insert(row)
            inserted += 1
        except sqlite3.Error as e:
            print(f"⚠️ Could not import shift dated {row.date}: {e}")
            failed += 1
    return {"inserted": inserted, "failed": failed}
