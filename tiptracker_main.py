import argparse
import json
import sqlite3
import sys
from datetime import date

from tiptracker import settings
from tiptracker.aggregation import (
    daily_series,
    distribution_by_shift_type,
    heatmap_cells,
    summarize_shifts,
    weekly_buckets,
)
from tiptracker.csv_io import IMPORT_MODES, export_csv, import_csv, parse_csv
from tiptracker.file_output import save_results
from tiptracker.filters import RANGE_KEYS, filter_by_date_span, filter_by_range, filter_by_shift_type
from tiptracker.models import SHIFT_TYPES
from tiptracker.reporting import (
    print_daily_series,
    print_distribution,
    print_heatmap,
    print_history,
    print_shift_detail,
    print_summary_report,
    print_weekly_report,
)
from tiptracker.storage import ShiftStore, pop_deleted, remember_deleted, restore_shift
from tiptracker.utils import get_week_bounds, to_number
from tiptracker.validation import build_shift_input, form_defaults, validate_shift_form

FORM_ARGS = {
    "date": "date",
    "type": "shift_type",
    "hours": "hours_worked",
    "cash": "cash_tips",
    "card": "card_tips",
    "basis": "tip_out_basis",
    "percent": "tip_out_percent",
    "sales": "sales",
    "override": "tip_out_override_amount",
    "wage": "base_hourly_wage",
    "notes": "notes",
}


def add_form_arguments(parser):
    parser.add_argument("--date", help="Shift date (YYYY-MM-DD)")
    parser.add_argument("--type", choices=SHIFT_TYPES, help="Shift type")
    parser.add_argument("--hours", help="Hours worked (0-18)")
    parser.add_argument("--cash", help="Cash tips, e.g. 120 or $120.00")
    parser.add_argument("--card", help="Card tips")
    parser.add_argument("--basis", choices=["tips", "sales"], help="What the tip-out percent applies to")
    parser.add_argument("--percent", help="Tip-out percent (0-100)")
    parser.add_argument("--sales", help="Sales total (required when basis is sales)")
    parser.add_argument("--override", help="Manual tip-out amount; replaces the percentage")
    parser.add_argument("--wage", help="Base hourly wage")
    parser.add_argument("--notes", help="Free-text notes")


def form_from_args(args):
    return {
        field: getattr(args, arg)
        for arg, field in FORM_ARGS.items()
        if getattr(args, arg) is not None
    }


def print_errors(errors):
    print("❌ Shift not saved:")
    for e in errors:
        print(f"   - {e}")


def cmd_add(args, store, prefs):
    form = {"date": date.today().isoformat(), "shift_type": "Dinner", **form_defaults(prefs)}
    form.update(form_from_args(args))

    errors = validate_shift_form(form)
    if errors:
        print_errors(errors)
        return 1

    shift_id = store.insert(build_shift_input(form))
    if prefs["rememberLastWage"]:
        settings.set("lastWage", to_number(form["base_hourly_wage"]), args.settings)

    print("✅ Shift saved successfully!")
    print_shift_detail(store.get_by_id(shift_id))
    return 0


def cmd_list(args, store, prefs):
    records = store.list()
    if args.week:
        start, end = get_week_bounds(args.week, prefs["startOfWeek"])
        print(f"📅 Week: {start} → {end}")
        records = filter_by_date_span(records, start, end)
    records = filter_by_shift_type(filter_by_range(records, args.range), args.type)

    if not records:
        print("No shifts yet. Add your first shift with the `add` command.")
        return 0
    print_history(records)
    return 0


def cmd_show(args, store, prefs):
    record = store.get_by_id(args.id)
    if record is None:
        print(f"⚠️ Shift not found: {args.id}")
        return 1
    print_shift_detail(record)
    return 0


def cmd_edit(args, store, prefs):
    record = store.get_by_id(args.id)
    if record is None:
        print(f"⚠️ Shift not found: {args.id}")
        return 1

    form = record.to_input().as_dict()
    form.update(form_from_args(args))

    errors = validate_shift_form(form)
    if errors:
        print_errors(errors)
        return 1

    store.update(args.id, build_shift_input(form).as_dict())
    print("✅ Shift updated.")
    print_shift_detail(store.get_by_id(args.id))
    return 0


def cmd_delete(args, store, prefs):
    record = store.get_by_id(args.id)
    if record is None:
        print(f"⚠️ Shift not found: {args.id}")
        return 1

    if not args.yes:
        answer = input("Delete this shift permanently? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Cancelled.")
            return 0

    remember_deleted(store, record)
    store.delete(args.id)
    print("🗑️ Shift deleted. Run `undo` to add it back (it will get a new id).")
    return 0


def cmd_undo(args, store, prefs):
    record = pop_deleted(store)
    if record is None:
        print("⚠️ Nothing to undo.")
        return 1
    new_id = restore_shift(store, record)
    print(f"✅ Restored shift from {record.date} as {new_id}")
    return 0


def cmd_wipe(args, store, prefs):
    if not args.yes:
        answer = input("Delete ALL shifts? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Cancelled.")
            return 0
    store.delete_all()
    print("🗑️ All shifts deleted.")
    return 0


def cmd_seed(args, store, prefs):
    ids = store.seed_sample_data()
    print(f"✅ Seeded {len(ids)} sample shifts.")
    return 0


def cmd_export(args, store, prefs):
    export_csv(store, args.output)
    print(f"💾 Exported {len(store.list())} shifts to {args.output}")
    return 0


def cmd_import(args, store, prefs):
    with open(args.file, "r", encoding="utf-8-sig") as f:
        text = f.read()

    result = parse_csv(text)
    for e in result.errors:
        print(f"⚠️ {e}")
    if result.skipped:
        print(f"⚠️ Skipped {result.skipped} invalid rows.")

    outcome = import_csv(store, result.rows, mode=args.mode)
    print(f"✅ Imported {outcome['inserted']} shifts ({args.mode}).")
    if outcome["failed"]:
        print(f"❌ {outcome['failed']} rows could not be saved.")
        return 1
    return 0


def cmd_snapshot(args, store, prefs):
    records = store.list()
    if not records:
        print("❌ No shifts to save.")
        return 1
    save_results(records, out_dir=args.out_dir)
    return 0


def _filtered(args, store):
    records = filter_by_range(store.list(), args.range, today=args.today)
    return filter_by_shift_type(records, args.type)


def cmd_insights(args, store, prefs):
    records = _filtered(args, store)
    print_summary_report(summarize_shifts(records), title=f"Insights ({args.range}, {args.type})")
    if records:
        print_daily_series(daily_series(records))
        print_heatmap(heatmap_cells(records))
        print_distribution(distribution_by_shift_type(records))
    return 0


def cmd_weekly(args, store, prefs):
    records = _filtered(args, store)
    week_start = prefs["startOfWeek"]
    print_weekly_report(weekly_buckets(records, week_start), title=f"Weekly Trend (weeks start {week_start})")
    return 0


def _parse_setting_value(text):
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def cmd_settings(args, store, prefs):
    if args.action == "set":
        if args.key is None or args.value is None:
            print("❌ Usage: settings set KEY VALUE")
            return 1
        settings.set(args.key, _parse_setting_value(args.value), args.settings)
        prefs = settings.get_all(args.settings)
    elif args.action == "reset":
        settings.reset(args.settings)
        prefs = settings.get_all(args.settings)

    for key, value in prefs.items():
        print(f"{key:<22} {json.dumps(value)}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description="Track tips, tip-outs and effective hourly earnings per shift.")
    parser.add_argument("--db", help="SQLite database path (default: $TIPTRACKER_DB or tips.db)")
    parser.add_argument("--settings", help="Settings file (default: $TIPTRACKER_SETTINGS or tiptracker_settings.json)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("add", help="Log a new shift")
    add_form_arguments(p)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("list", help="Show shift history")
    p.add_argument("--range", choices=RANGE_KEYS, default="all")
    p.add_argument("--type", choices=["all", *SHIFT_TYPES], default="all")
    p.add_argument("--week", help="Only the week containing this date (YYYY-MM-DD)")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("show", help="Show one shift with its metrics")
    p.add_argument("id")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("edit", help="Change fields of a shift")
    p.add_argument("id")
    add_form_arguments(p)
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("delete", help="Delete a shift")
    p.add_argument("id")
    p.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("undo", help="Re-create the last deleted shift")
    p.set_defaults(func=cmd_undo)

    p = sub.add_parser("wipe", help="Delete all shifts")
    p.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    p.set_defaults(func=cmd_wipe)

    p = sub.add_parser("seed", help="Insert sample shifts")
    p.set_defaults(func=cmd_seed)

    p = sub.add_parser("export", help="Export shifts to CSV")
    p.add_argument("--output", default="tip-tracker.csv")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("import", help="Import shifts from CSV")
    p.add_argument("file")
    p.add_argument("--mode", choices=IMPORT_MODES, default="append")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("snapshot", help="Save shifts with metrics as JSON + Excel")
    p.add_argument("--out-dir", default=".")
    p.set_defaults(func=cmd_snapshot)

    for name, func, default_range in (("insights", cmd_insights, "30d"), ("weekly", cmd_weekly, "all")):
        p = sub.add_parser(name, help=f"{name.capitalize()} report")
        p.add_argument("--range", choices=RANGE_KEYS, default=default_range)
        p.add_argument("--type", choices=["all", *SHIFT_TYPES], default="all")
        p.add_argument("--today", help="Reference date for --range (YYYY-MM-DD); default today")
        p.set_defaults(func=func)

    p = sub.add_parser("settings", help="Show or change settings")
    p.add_argument("action", choices=["show", "set", "reset"], nargs="?", default="show")
    p.add_argument("key", nargs="?")
    p.add_argument("value", nargs="?")
    p.set_defaults(func=cmd_settings)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    prefs = settings.get_all(args.settings)

    store = ShiftStore(args.db)
    try:
        return args.func(args, store, prefs)
    except sqlite3.Error as e:
        print(f"❌ Storage error: {e}")
        return 1
    except (OSError, ValueError) as e:
        print(f"❌ {e}")
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
