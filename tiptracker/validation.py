"""
Form-level checks for adding or editing a shift.

The metrics engine accepts anything; these rules are what a user has to
satisfy before a shift is saved.
"""

from .calculations import has_override
from .models import ShiftInput
from .utils import is_iso_date, to_number

MAX_SHIFT_HOURS = 18


def _blank(value):
    return value is None or str(value).strip() == ""


def validate_shift_form(fields):
    """
    Returns a list of human-readable errors for a dict of raw form values.
    An empty list means the shift can be saved.
    """
    errors = []

    date = (fields.get("date") or "").strip()
    if not date:
        errors.append("Date required")
    elif not is_iso_date(date):
        errors.append(f'Invalid date "{date}" (expected YYYY-MM-DD)')

    hours = to_number(fields.get("hours_worked"))
    if not (0 < hours <= MAX_SHIFT_HOURS):
        errors.append(f"Hours must be between 0 and {MAX_SHIFT_HOURS}")

    if to_number(fields.get("base_hourly_wage")) < 0:
        errors.append("Base wage must be ≥ 0")

    pct = to_number(fields.get("tip_out_percent"))
    if not (0 <= pct <= 100):
        errors.append("Tip-out percent must be 0–100")

    basis = fields.get("tip_out_basis") or "tips"
    if basis not in ("tips", "sales"):
        errors.append('Tip-out basis must be "tips" or "sales"')
    elif basis == "sales" and _blank(fields.get("sales")):
        errors.append("Sales required when basis = sales")

    return errors


def build_shift_input(fields):
    """
    Turns raw form values into a ShiftInput with normalized numbers.
    Sales are kept only for the sales basis, the override only when filled in.
    """
    basis = fields.get("tip_out_basis") or "tips"
    override = fields.get("tip_out_override_amount")
    notes = (fields.get("notes") or "").strip()
    shift_type = (fields.get("shift_type") or "").strip()

    return ShiftInput(
        date=(fields.get("date") or "").strip(),
        shift_type=shift_type or None,
        hours_worked=to_number(fields.get("hours_worked")),
        cash_tips=to_number(fields.get("cash_tips")),
        card_tips=to_number(fields.get("card_tips")),
        tip_out_basis=basis,
        tip_out_percent=to_number(fields.get("tip_out_percent")),
        sales=to_number(fields.get("sales")) if basis == "sales" else None,
        tip_out_override_amount=to_number(override) if has_override(override) else None,
        base_hourly_wage=to_number(fields.get("base_hourly_wage")),
        notes=notes or None,
    )


def form_defaults(settings):
    """Initial values for a new shift form, taken from resolved settings."""
    if settings.get("rememberLastWage") and settings.get("lastWage") is not None:
        wage = settings["lastWage"]
    else:
        wage = settings.get("defaultHourlyWage")

    return {
        "tip_out_basis": settings.get("defaultTipOutBasis", "tips"),
        "tip_out_percent": settings.get("defaultTipOutPercent", 0),
        "base_hourly_wage": wage,
    }
