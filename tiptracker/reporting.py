from textwrap import shorten

from .calculations import compute_shift_metrics, has_override
from .utils import DAY_NAMES, to_number


def currency(n):
    return f"${n:,.2f}"


def print_history(records, title="Shift History"):
    print("\n" + title)
    print("=" * 96)
    print(f"{'Date':<12} {'Type':<8} {'Hours':>7} {'Tip-out':>10} {'Net Tips':>10} {'Gross':>10} {'Eff/hr':>9}  {'ID':<20}")
    print("-" * 96)

    for r in records:
        m = compute_shift_metrics(r)
        shift_type = shorten(r.shift_type or "Unknown", width=8, placeholder="…")
        print(
            f"{r.date:<12} {shift_type:<8} {to_number(r.hours_worked):7.2f} "
            f"{m.tip_out:10.2f} {m.net_tips:10.2f} {m.shift_gross:10.2f} {m.effective_hourly:9.2f}  "
            f"{r.id[:20]:<20}"
        )

    print("=" * 96)


def print_shift_detail(record):
    m = compute_shift_metrics(record)
    basis = record.tip_out_basis or "tips"

    print(f"\n{record.date} • {record.shift_type or 'Unknown'}  ({record.id})")
    print("=" * 50)
    print(f"{'Hours worked':<26} {to_number(record.hours_worked):>12.2f}")
    print(f"{'Cash tips':<26} {currency(to_number(record.cash_tips)):>12}")
    print(f"{'Card tips':<26} {currency(to_number(record.card_tips)):>12}")
    if has_override(record.tip_out_override_amount):
        print(f"{'Tip-out (override)':<26} {currency(m.tip_out):>12}")
    else:
        pct = to_number(record.tip_out_percent)
        print(f"{f'Tip-out ({pct:g}% of {basis})':<26} {currency(m.tip_out):>12}")
    if basis == "sales":
        print(f"{'Sales':<26} {currency(to_number(record.sales)):>12}")
    print(f"{'Base wage':<26} {currency(to_number(record.base_hourly_wage)):>12}")
    print("-" * 50)
    print(f"{'Net tips':<26} {currency(m.net_tips):>12}")
    print(f"{'Wages earned':<26} {currency(m.wages_earned):>12}")
    print(f"{'Shift gross':<26} {currency(m.shift_gross):>12}")
    print(f"{'Tips / hr':<26} {currency(m.hourly_tips):>12}")
    print(f"{'Effective / hr':<26} {currency(m.effective_hourly):>12}")
    if record.notes:
        print(f"\nNotes: {record.notes}")
    print("=" * 50)


def _best_line(label, best, value_key="eff", suffix="/hr"):
    if not best:
        return f"{label:<22} {'—':>14}"
    return (
        f"{label:<22} {currency(best[value_key]) + suffix:>14}  "
        f"{best['label']} ({best['count']} shifts, {best['confidence']} confidence)"
    )


def print_summary_report(summary, title="Insights"):
    print("\n" + title)
    print("=" * 80)
    print(f"{'Shifts':<22} {summary['count']:>14}")
    print(f"{'Hours':<22} {summary['hours']:>14.2f}")
    print(f"{'Total tips':<22} {currency(summary['tips_base']):>14}  Cash + Card")
    print(f"{'Tip-out total':<22} {currency(summary['tip_out']):>14}")
    print(f"{'Net tips':<22} {currency(summary['net_tips']):>14}")
    print(f"{'Wages':<22} {currency(summary['wages']):>14}")
    print(f"{'Gross':<22} {currency(summary['gross']):>14}")
    print(f"{'Avg eff/hr':<22} {currency(summary['avg_eff_hourly']):>14}")
    print("-" * 80)
    print(_best_line("Best shift type", summary["best_shift_type"]))
    print(_best_line("Best day", summary["best_day_of_week"]))
    print(_best_line("Best hourly slot", summary["best_slot_hourly"]))
    print(_best_line("Best total slot", summary["best_slot_total"], value_key="value", suffix=" avg"))
    print("=" * 80)


def print_weekly_report(buckets, title="Weekly Trend"):
    print("\n" + title)
    print("=" * 70)
    print(f"{'Week of':<12} {'Shifts':>7} {'Hours':>8} {'Tips':>12} {'Gross':>12} {'Eff/hr':>10}")
    print("-" * 70)

    total_hours = 0
    total_tips = 0
    total_gross = 0
    for b in buckets:
        print(f"{b['week_start']:<12} {b['count']:>7} {b['hours']:8.2f} {b['tips']:12.2f} {b['gross']:12.2f} {b['eff']:10.2f}")
        total_hours += b["hours"]
        total_tips += b["tips"]
        total_gross += b["gross"]

    print("-" * 70)
    eff = total_gross / total_hours if total_hours > 0 else 0
    print(f"{'TOTALS':<12} {'':>7} {total_hours:8.2f} {total_tips:12.2f} {total_gross:12.2f} {eff:10.2f}")
    print("=" * 70)


def print_daily_series(series, title="Effective $/hr by day"):
    print("\n" + title)
    print("=" * 40)
    print(f"{'Date':<12} {'Eff/hr':>12} {'Tips':>12}")
    print("-" * 40)
    for d in series:
        print(f"{d['date']:<12} {d['eff']:12.2f} {d['tips']:12.2f}")
    print("=" * 40)


def print_heatmap(cells, title="Avg effective $/hr by day and shift type"):
    types = []
    for c in cells:
        if c["shift_type"] not in types:
            types.append(c["shift_type"])
    lookup = {(c["day"], c["shift_type"]): c for c in cells}

    print("\n" + title)
    print("=" * 82)
    print(f"{'':<10}" + "".join(f"{day:>10}" for day in DAY_NAMES))
    print("-" * 82)
    for t in types:
        row = ""
        for day in DAY_NAMES:
            c = lookup[(day, t)]
            row += f"{c['value']:10.2f}" if c["n"] else f"{'·':>10}"
        print(f"{shorten(t, width=10, placeholder='…'):<10}{row}")
    print("=" * 82)


def print_distribution(rows, title="Distribution by shift type (effective $/hr)"):
    print("\n" + title)
    print("=" * 72)
    print(f"{'Type':<10} {'n':>4} {'Min':>10} {'Q1':>10} {'Median':>10} {'Q3':>10} {'Max':>10}")
    print("-" * 72)
    for r in rows:
        print(
            f"{shorten(r['shift_type'], width=10, placeholder='…'):<10} {r['n']:>4} "
            f"{r['min']:10.2f} {r['q1']:10.2f} {r['median']:10.2f} {r['q3']:10.2f} {r['max']:10.2f}"
        )
    print("=" * 72)
