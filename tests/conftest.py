"""Shared fixtures: a temp-file SQLite store, settings file and sample shifts."""
import pytest

from tiptracker.models import ShiftInput, ShiftRecord
from tiptracker.storage import ShiftStore


@pytest.fixture
def store(tmp_path):
    """Yield a fresh ShiftStore bound to a temp SQLite database."""
    s = ShiftStore(str(tmp_path / "tips.db"))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def settings_file(tmp_path):
    return str(tmp_path / "settings.json")


@pytest.fixture
def seeded_store(store):
    store.seed_sample_data()
    return store


def make_record(date, shift_type="Dinner", hours=0, wage=0, cash=0, card=0, **extra):
    """Helper: a ShiftRecord with a tips-basis, 0% tip-out unless overridden."""
    fields = dict(
        date=date,
        shift_type=shift_type,
        hours_worked=hours,
        cash_tips=cash,
        card_tips=card,
        tip_out_basis="tips",
        tip_out_percent=0,
        base_hourly_wage=wage,
    )
    fields.update(extra)
    return ShiftRecord(id=f"rec-{date}-{shift_type}", **fields)


@pytest.fixture
def sample_records():
    """The three sample shifts, as records (2025-07-21 Mon, 07-27 Sun, 08-02 Sat)."""
    return [
        ShiftRecord(id="s1", date="2025-07-21", shift_type="Dinner", hours_worked=6, cash_tips=120,
                    card_tips=280, tip_out_basis="tips", tip_out_percent=5, base_hourly_wage=5),
        ShiftRecord(id="s2", date="2025-07-27", shift_type="Brunch", hours_worked=5, cash_tips=90,
                    card_tips=110, tip_out_basis="sales", tip_out_percent=1.5, sales=1000,
                    base_hourly_wage=5, notes="slow brunch"),
        ShiftRecord(id="s3", date="2025-08-02", shift_type="Dinner", hours_worked=7.5, cash_tips=200,
                    card_tips=300, tip_out_basis="tips", tip_out_percent=3, base_hourly_wage=5,
                    notes="busy patio"),
    ]


@pytest.fixture
def dinner_input():
    return ShiftInput(date="2025-07-21", shift_type="Dinner", hours_worked=6, cash_tips=120,
                      card_tips=280, tip_out_basis="tips", tip_out_percent=5, base_hourly_wage=5)
