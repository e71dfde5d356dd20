"""
Per-shift tip and earnings tracking.

Usage:
    python3 tiptracker_main.py add --date 2025-07-21 --type Dinner --hours 6 --cash 120 --card 280 --wage 5
    python3 tiptracker_main.py insights --range 30d
"""
from .utils import to_number, round2, start_of_week, get_week_bounds, day_of_week
from .models import ShiftInput, ShiftRecord, DerivedMetrics, SHIFT_TYPES
from .calculations import compute_tip_out, compute_derived, compute_shift_metrics
from .aggregation import (
    summarize_shifts, weekly_buckets, daily_series, heatmap_cells,
    distribution_by_shift_type, weighted_group_rates, confidence_label,
)
from .filters import filter_by_range, filter_by_shift_type, filter_by_date_span
from .validation import validate_shift_form, build_shift_input, form_defaults
from .storage import ShiftStore, restore_shift
from .csv_io import build_csv, export_csv, parse_csv, import_csv
