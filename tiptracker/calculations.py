"""
Shift metrics engine.

Pure functions shared by every screen that shows money: the add/edit forms,
the history list, CSV export and the insights rollups. All numeric inputs go
through `to_number`, so they may be numbers, text like "$1,234" or None.
"""

from .models import DerivedMetrics
from .utils import round2, to_number


def has_override(amount):
    return amount is not None and str(amount).strip() != ""


def compute_tip_out(cash_tips, card_tips, tip_out_basis, tip_out_percent, sales=None, tip_out_override_amount=None):
    """
    Amount tipped out for one shift.

    A non-empty override wins outright (floored at 0). Otherwise the percent
    is applied to sales when basis == "sales", else to cash + card tips.
    """
    if has_override(tip_out_override_amount):
        return max(round2(tip_out_override_amount), 0.0)

    tips_base = to_number(cash_tips) + to_number(card_tips)
    base = to_number(sales) if tip_out_basis == "sales" else tips_base
    return round2(base * (to_number(tip_out_percent) / 100))


def compute_derived(hours_worked, cash_tips, card_tips, base_hourly_wage, tip_out):
    """
    Everything after the tip-out, given an already computed `tip_out`.
    Used by the forms to preview a shift before it is saved.
    """
    hours = to_number(hours_worked)
    tips_base = to_number(cash_tips) + to_number(card_tips)
    tip_out = to_number(tip_out)

    net_tips = round2(tips_base - tip_out)
    wages_earned = round2(to_number(base_hourly_wage) * hours)
    shift_gross = round2(net_tips + wages_earned)

    # rates are the only zero-hours guarded outputs
    hourly_tips = round2(net_tips / hours) if hours > 0 else 0.0
    effective_hourly = round2(shift_gross / hours) if hours > 0 else 0.0

    return DerivedMetrics(
        tip_out=round2(tip_out),
        net_tips=net_tips,
        wages_earned=wages_earned,
        shift_gross=shift_gross,
        hourly_tips=hourly_tips,
        effective_hourly=effective_hourly,
        tips_base=round2(tips_base),
    )


def _get(shift, name):
    if isinstance(shift, dict):
        return shift.get(name)
    return getattr(shift, name, None)


def compute_shift_metrics(shift):
    """
    Full metrics for a ShiftInput / ShiftRecord or a plain dict with the same keys.
    """
    hours = to_number(_get(shift, "hours_worked"))
    cash = to_number(_get(shift, "cash_tips"))
    card = to_number(_get(shift, "card_tips"))
    wage = to_number(_get(shift, "base_hourly_wage"))
    override = _get(shift, "tip_out_override_amount")

    tip_out = compute_tip_out(
        cash,
        card,
        _get(shift, "tip_out_basis"),
        to_number(_get(shift, "tip_out_percent")),
        to_number(_get(shift, "sales")),
        override if has_override(override) else None,
    )
    return compute_derived(hours, cash, card, wage, tip_out)
