from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Literal, Optional, Union

NumericInput = Union[int, float, str, None]
TipOutBasis = Literal["tips", "sales"]
StartOfWeek = Literal["sun", "mon"]

SHIFT_TYPES = ("Brunch", "Lunch", "Dinner")


@dataclass
class ShiftInput:
    """Raw shift fields as entered, stored or read back from CSV."""
    date: str                                           # YYYY-MM-DD
    shift_type: Optional[str] = None                    # Brunch | Lunch | Dinner
    hours_worked: NumericInput = 0
    cash_tips: NumericInput = 0
    card_tips: NumericInput = 0
    tip_out_basis: Optional[TipOutBasis] = "tips"
    tip_out_percent: NumericInput = 0                   # 0..100
    sales: NumericInput = None                          # only read when basis == "sales"
    tip_out_override_amount: NumericInput = None        # replaces the percentage when set
    base_hourly_wage: NumericInput = 0
    notes: Optional[str] = None

    def as_dict(self):
        return asdict(self)

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]


@dataclass
class ShiftRecord(ShiftInput):
    id: str = ""

    def to_input(self):
        data = self.as_dict()
        data.pop("id")
        return ShiftInput(**data)


@dataclass(frozen=True)
class DerivedMetrics:
    tip_out: float
    net_tips: float
    wages_earned: float
    shift_gross: float
    hourly_tips: float
    effective_hourly: float
    tips_base: float = 0.0

    def as_dict(self):
        return asdict(self)
