"""
End-to-end tests for the command line entry point, against temp files.
"""
import pytest

from tiptracker import settings
from tiptracker.storage import ShiftStore
from tiptracker_main import main


@pytest.fixture
def run(tmp_path, capsys):
    db = str(tmp_path / "tips.db")
    prefs = str(tmp_path / "settings.json")

    def _run(*argv):
        code = main(["--db", db, "--settings", prefs, *argv])
        return code, capsys.readouterr().out

    _run.db = db
    _run.settings = prefs
    return _run


def stored(db):
    store = ShiftStore(db)
    try:
        return store.list()
    finally:
        store.close()


class TestCli:
    """Drive the CLI the way a user would."""

    def test_empty_list(self, run):
        code, out = run("list")
        assert code == 0
        assert "No shifts yet" in out

    def test_seed_and_list(self, run):
        code, out = run("seed")
        assert code == 0
        assert "Seeded 3 sample shifts" in out

        code, out = run("list", "--type", "Dinner")
        assert "2025-08-02" in out and "2025-07-21" in out
        assert "2025-07-27" not in out

    def test_list_week(self, run):
        run("seed")
        code, out = run("list", "--week", "2025-07-30")
        assert "2025-07-27 → 2025-08-03" in out
        assert "2025-08-02" in out
        assert "2025-07-21" not in out

    def test_add_valid(self, run):
        code, out = run("add", "--date", "2025-08-03", "--type", "Lunch", "--hours", "5", "--cash", "$50",
                        "--card", "50", "--percent", "0", "--wage", "10")
        assert code == 0
        assert "Shift saved" in out
        (record,) = stored(run.db)
        assert record.shift_type == "Lunch"
        assert record.cash_tips == 50
        assert "$30.00" in out

    def test_add_uses_setting_defaults(self, run):
        run("settings", "set", "defaultTipOutPercent", "10")
        code, _ = run("add", "--date", "2025-08-03", "--hours", "4", "--cash", "100")
        assert code == 0
        (record,) = stored(run.db)
        assert record.tip_out_percent == 10
        assert record.base_hourly_wage == 15
        assert record.shift_type == "Dinner"

    def test_add_remembers_wage(self, run):
        run("settings", "set", "rememberLastWage", "true")
        run("add", "--date", "2025-08-03", "--hours", "4", "--wage", "11.5")
        assert settings.get("lastWage", run.settings) == 11.5

    def test_add_invalid(self, run):
        code, out = run("add", "--date", "2025-13-01", "--hours", "0")
        assert code == 1
        assert "Shift not saved" in out
        assert "Hours must be between 0 and 18" in out
        assert 'Invalid date "2025-13-01"' in out
        assert stored(run.db) == []

    def test_edit(self, run):
        run("seed")
        target = [r for r in stored(run.db) if r.date == "2025-07-21"][0]
        code, out = run("edit", target.id, "--cash", "220")
        assert code == 0
        assert "Shift updated" in out
        assert [r for r in stored(run.db) if r.id == target.id][0].cash_tips == 220

    def test_show_missing(self, run):
        code, out = run("show", "missing-id")
        assert code == 1
        assert "Shift not found" in out

    def test_insights(self, run):
        run("seed")
        code, out = run("insights", "--range", "all")
        assert code == 0
        assert "$1,142.50" in out
        assert "$61.76" in out
        assert "Dinner (2 shifts, Low confidence)" in out

    def test_insights_range_uses_today(self, run):
        run("seed")
        code, out = run("insights", "--range", "7d", "--today", "2025-08-02")
        assert code == 0
        assert "$732.50" in out

    def test_weekly_follows_start_of_week(self, run):
        run("seed")
        run("settings", "set", "startOfWeek", "mon")
        code, out = run("weekly")
        assert code == 0
        assert "weeks start mon" in out
        assert "2025-07-21" in out and "2025-07-28" in out

    def test_export_import(self, run, tmp_path):
        run("seed")
        path = str(tmp_path / "tips.csv")
        code, out = run("export", "--output", path)
        assert code == 0
        assert "Exported 3 shifts" in out

        code, out = run("import", path, "--mode", "replace")
        assert code == 0
        assert "Imported 3 shifts (replace)" in out
        assert len(stored(run.db)) == 3

        code, out = run("import", path)
        assert len(stored(run.db)) == 6

    def test_import_reports_bad_rows(self, run, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("date,hours_worked\n2025-07-21,4\nnope,4\n", encoding="utf-8")
        code, out = run("import", str(path))
        assert code == 0
        assert 'Row 3: invalid date "nope"' in out
        assert "Skipped 1 invalid rows" in out
        assert len(stored(run.db)) == 1

    def test_edit_imported_shift_without_wage(self, run, tmp_path):
        path = tmp_path / "nowage.csv"
        path.write_text("date,hours_worked,cash_tips\n2025-07-21,4,100\n", encoding="utf-8")
        assert run("import", str(path))[0] == 0
        (record,) = stored(run.db)
        assert record.base_hourly_wage is None

        code, out = run("edit", record.id, "--cash", "120")
        assert code == 0
        assert "Shift updated" in out
        (record,) = stored(run.db)
        assert record.cash_tips == 120
        assert record.base_hourly_wage == 0

    def test_delete_and_undo(self, run):
        run("seed")
        victim = stored(run.db)[0]
        code, out = run("delete", victim.id, "--yes")
        assert code == 0
        assert len(stored(run.db)) == 2

        code, out = run("undo")
        assert code == 0
        records = stored(run.db)
        assert len(records) == 3
        assert victim.id not in {r.id for r in records}

        code, out = run("undo")
        assert code == 1
        assert "Nothing to undo" in out

    def test_snapshot(self, run, tmp_path):
        out_dir = tmp_path / "snapshots"
        out_dir.mkdir()
        assert run("snapshot", "--out-dir", str(out_dir))[0] == 1

        run("seed")
        code, out = run("snapshot", "--out-dir", str(out_dir))
        assert code == 0
        assert "Saved 3 shifts" in out
        assert sorted(p.suffix for p in out_dir.iterdir()) == [".json", ".xlsx"]

    def test_wipe(self, run):
        run("seed")
        assert run("wipe", "--yes")[0] == 0
        assert stored(run.db) == []

    def test_settings(self, run):
        code, out = run("settings", "set", "startOfWeek", "mon")
        assert code == 0
        assert 'startOfWeek            "mon"' in out

        code, out = run("settings", "set", "startOfWeek", "fri")
        assert code == 1

        code, out = run("settings", "reset")
        assert 'startOfWeek            "sun"' in out
