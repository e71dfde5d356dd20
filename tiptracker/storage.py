import json
import os
import sqlite3
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from .models import ShiftInput, ShiftRecord

DEFAULT_DB_PATH = "tips.db"

COLUMNS = ShiftInput.field_names()

SAMPLE_SHIFTS = [
    ShiftInput(date="2025-07-21", shift_type="Dinner", hours_worked=6, cash_tips=120, card_tips=280,
               tip_out_basis="tips", tip_out_percent=5, base_hourly_wage=5),
    ShiftInput(date="2025-07-27", shift_type="Brunch", hours_worked=5, cash_tips=90, card_tips=110,
               tip_out_basis="sales", tip_out_percent=1.5, sales=1000, base_hourly_wage=5,
               notes="slow brunch"),
    ShiftInput(date="2025-08-02", shift_type="Dinner", hours_worked=7.5, cash_tips=200, card_tips=300,
               tip_out_basis="tips", tip_out_percent=3, base_hourly_wage=5, notes="busy patio"),
]


def db_path(path=None):
    return path or os.getenv("TIPTRACKER_DB") or DEFAULT_DB_PATH


class ShiftStore:
    """SQLite-backed shift storage. Ids are UUID4 strings assigned on insert."""

    def __init__(self, path: Optional[str] = None):
        self.db_path = db_path(path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._create_tables()

    def _create_tables(self):
        cur = self.conn.cursor()
        cur.execute("""
        CREATE TABLE IF NOT EXISTS shifts(
            id TEXT PRIMARY KEY NOT NULL,
            date TEXT NOT NULL,              -- YYYY-MM-DD
            shift_type TEXT,                 -- 'Brunch' | 'Lunch' | 'Dinner'
            hours_worked REAL,
            cash_tips REAL,
            card_tips REAL,
            tip_out_basis TEXT,              -- 'tips' | 'sales'
            tip_out_percent REAL,            -- 0..100
            sales REAL,                      -- only used when basis = 'sales'
            tip_out_override_amount REAL,
            base_hourly_wage REAL,
            notes TEXT
        );
        """)
        cur.execute("CREATE INDEX IF NOT EXISTS ix_shifts_date ON shifts(date);")
        self.conn.commit()

    def close(self):
        self.conn.close()

    @staticmethod
    def _row_to_record(row) -> ShiftRecord:
        return ShiftRecord(**dict(row))

    def insert(self, shift: ShiftInput) -> str:
        data = shift.as_dict() if isinstance(shift, ShiftInput) else dict(shift)
        shift_id = str(uuid.uuid4())
        values = [data.get(c) for c in COLUMNS]
        cur = self.conn.cursor()
        cur.execute(
            f"INSERT INTO shifts(id, {', '.join(COLUMNS)}) VALUES({', '.join('?' * (len(COLUMNS) + 1))})",
            [shift_id, *values],
        )
        self.conn.commit()
        return shift_id

    def list(self) -> List[ShiftRecord]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM shifts ORDER BY date DESC;")
        return [self._row_to_record(r) for r in cur.fetchall()]

    def get_by_id(self, shift_id: str) -> Optional[ShiftRecord]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM shifts WHERE id=?", (shift_id,))
        row = cur.fetchone()
        return self._row_to_record(row) if row else None

    def update(self, shift_id: str, fields: Dict) -> None:
        if not fields:
            return
        unknown = [k for k in fields if k not in COLUMNS]
        if unknown:
            raise ValueError(f"Unknown shift fields: {', '.join(unknown)}")

        set_clause = ", ".join(f"{k}=?" for k in fields)
        cur = self.conn.cursor()
        cur.execute(f"UPDATE shifts SET {set_clause} WHERE id=?", [*fields.values(), shift_id])
        self.conn.commit()

    def delete(self, shift_id: str) -> None:
        cur = self.conn.cursor()
        cur.execute("DELETE FROM shifts WHERE id=?", (shift_id,))
        self.conn.commit()

    def delete_all(self) -> None:
        cur = self.conn.cursor()
        cur.execute("DELETE FROM shifts")
        self.conn.commit()

    def seed_sample_data(self) -> List[str]:
        return [self.insert(s) for s in SAMPLE_SHIFTS]


def restore_shift(store: ShiftStore, record: ShiftRecord) -> str:
    """
    Undo for a delete: re-inserts the record's values as a new shift.
    The restored shift gets a new id.
    """
    return store.insert(record.to_input())


def last_deleted_path(store: ShiftStore) -> str:
    if store.db_path == ":memory:":
        return "last_deleted.json"
    return str(Path(store.db_path).with_suffix(".last_deleted.json"))


def remember_deleted(store: ShiftStore, record: ShiftRecord) -> None:
    with open(last_deleted_path(store), "w", encoding="utf-8") as f:
        json.dump(record.as_dict(), f, indent=2, ensure_ascii=False)


def pop_deleted(store: ShiftStore) -> Optional[ShiftRecord]:
    path = last_deleted_path(store)
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    os.remove(path)
    return ShiftRecord(**data)
