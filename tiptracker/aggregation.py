from collections import defaultdict

from .calculations import compute_shift_metrics
from .utils import DAY_NAMES, START_OF_WEEK_CHOICES, day_of_week, is_iso_date, round2, start_of_week, to_number

UNKNOWN = "Unknown"


def _field(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _shift_type(record):
    return _field(record, "shift_type") or UNKNOWN


def _day_label(record):
    try:
        return day_of_week(_field(record, "date"))
    except ValueError:
        return UNKNOWN


def attach_metrics(records):
    """Pairs each record with its freshly computed metrics."""
    return [(r, compute_shift_metrics(r)) for r in records]


def confidence_label(n):
    if n >= 8:
        return "High"
    if n >= 3:
        return "Medium"
    return "Low"


def weighted_group_rates(pairs, key_fn):
    """
    Returns dict[key] = {"eff_sum", "hours", "count", "eff"} where eff is
    sum(effective_hourly * hours) / sum(hours), or None for zero-hour groups.
    """
    groups = defaultdict(lambda: {"eff_sum": 0.0, "hours": 0.0, "count": 0, "eff": None})

    for record, m in pairs:
        hours = to_number(_field(record, "hours_worked"))
        g = groups[key_fn(record)]
        g["eff_sum"] += m.effective_hourly * hours
        g["hours"] += hours
        g["count"] += 1

    for g in groups.values():
        if g["hours"] > 0:
            g["eff"] = g["eff_sum"] / g["hours"]

    return dict(groups)


def best_group(groups):
    """Highest hours-weighted eff/hr; groups without hours never win."""
    ranked = [(label, g) for label, g in groups.items() if g["hours"] > 0]
    if not ranked:
        return None

    label, g = max(ranked, key=lambda item: item[1]["eff"])
    return {
        "label": label,
        "eff": round2(g["eff"]),
        "count": g["count"],
        "confidence": confidence_label(g["count"]),
    }


def _slot_label(record):
    return f"{_day_label(record)} {_shift_type(record)}"


def best_by_shift_type(pairs):
    return best_group(weighted_group_rates(pairs, _shift_type))


def best_by_day_of_week(pairs):
    return best_group(weighted_group_rates(pairs, _day_label))


def best_slot_by_hourly(pairs):
    return best_group(weighted_group_rates(pairs, _slot_label))


def best_slot_by_total(pairs):
    """Day x shift-type slot with the highest average gross per shift."""
    totals = defaultdict(lambda: {"sum": 0.0, "count": 0})
    for record, m in pairs:
        t = totals[_slot_label(record)]
        t["sum"] += m.shift_gross
        t["count"] += 1

    if not totals:
        return None

    label, t = max(totals.items(), key=lambda item: item[1]["sum"] / item[1]["count"])
    return {
        "label": label,
        "value": round2(t["sum"] / t["count"]),
        "count": t["count"],
        "confidence": confidence_label(t["count"]),
    }


def summarize_shifts(records):
    """
    Totals across already-filtered shifts. avg_eff_hourly is gross / hours
    over the whole set, not a mean of per-shift rates.
    """
    pairs = attach_metrics(records)

    totals = {
        "count": 0,
        "hours": 0.0,
        "tips_base": 0.0,
        "tip_out": 0.0,
        "net_tips": 0.0,
        "wages": 0.0,
        "gross": 0.0,
    }
    for record, m in pairs:
        totals["count"] += 1
        totals["hours"] += to_number(_field(record, "hours_worked"))
        totals["tips_base"] += to_number(_field(record, "cash_tips")) + to_number(_field(record, "card_tips"))
        totals["tip_out"] += m.tip_out
        totals["net_tips"] += m.net_tips
        totals["wages"] += m.wages_earned
        totals["gross"] += m.shift_gross

    avg_eff = totals["gross"] / totals["hours"] if totals["hours"] > 0 else 0.0

    summary = {k: (v if k == "count" else round2(v)) for k, v in totals.items()}
    summary["avg_eff_hourly"] = round2(avg_eff)
    summary["best_shift_type"] = best_by_shift_type(pairs)
    summary["best_day_of_week"] = best_by_day_of_week(pairs)
    summary["best_slot_hourly"] = best_slot_by_hourly(pairs)
    summary["best_slot_total"] = best_slot_by_total(pairs)
    return summary


def weekly_buckets(records, week_start="sun"):
    """
    Sums hours, gross and base tips per week. The bucket key is the ISO date
    of the first day of the week; eff is the bucket's gross / hours.
    """
    if week_start not in START_OF_WEEK_CHOICES:
        raise ValueError(f"start of week must be one of {START_OF_WEEK_CHOICES}, got {week_start!r}")

    buckets = defaultdict(lambda: {"hours": 0.0, "gross": 0.0, "tips": 0.0, "count": 0})

    for record, m in attach_metrics(records):
        try:
            key = start_of_week(_field(record, "date"), week_start).isoformat()
        except ValueError:
            continue

        b = buckets[key]
        b["hours"] += to_number(_field(record, "hours_worked"))
        b["gross"] += m.shift_gross
        b["tips"] += to_number(_field(record, "cash_tips")) + to_number(_field(record, "card_tips"))
        b["count"] += 1

    return [
        {
            "week_start": key,
            "count": b["count"],
            "hours": round2(b["hours"]),
            "gross": round2(b["gross"]),
            "tips": round2(b["tips"]),
            "eff": round2(b["gross"] / b["hours"]) if b["hours"] > 0 else 0.0,
        }
        for key, b in sorted(buckets.items())
    ]


def daily_series(records):
    """Per date: mean effective hourly of that day's shifts and total base tips. Undated shifts are skipped."""
    by_date = defaultdict(lambda: {"eff": [], "tips": 0.0})
    for record, m in attach_metrics(records):
        day = _field(record, "date")
        if not is_iso_date(day):
            continue
        d = by_date[day]
        d["eff"].append(m.effective_hourly)
        d["tips"] += to_number(_field(record, "cash_tips")) + to_number(_field(record, "card_tips"))

    return [
        {"date": day, "eff": round2(sum(v["eff"]) / len(v["eff"])), "tips": round2(v["tips"])}
        for day, v in sorted(by_date.items())
    ]


def heatmap_cells(records):
    """Mean effective hourly per (day of week, shift type); 7 cells per type."""
    acc = defaultdict(lambda: {"sum": 0.0, "n": 0})
    types = set()
    for record, m in attach_metrics(records):
        t = _shift_type(record)
        types.add(t)
        cell = acc[(_day_label(record), t)]
        cell["sum"] += m.effective_hourly
        cell["n"] += 1

    cells = []
    for t in sorted(types):
        for day in DAY_NAMES:
            v = acc.get((day, t))
            cells.append({
                "day": day,
                "shift_type": t,
                "value": round2(v["sum"] / v["n"]) if v else 0.0,
                "n": v["n"] if v else 0,
            })
    return cells


def quantile(sorted_values, q):
    if not sorted_values:
        return 0.0
    pos = (len(sorted_values) - 1) * q
    base = int(pos)
    rest = pos - base
    if base + 1 < len(sorted_values):
        return sorted_values[base] + (sorted_values[base + 1] - sorted_values[base]) * rest
    return sorted_values[base]


def distribution_by_shift_type(records):
    by_type = defaultdict(list)
    for record, m in attach_metrics(records):
        by_type[_shift_type(record)].append(m.effective_hourly)

    rows = []
    for t in sorted(by_type):
        s = sorted(by_type[t])
        rows.append({
            "shift_type": t,
            "min": s[0],
            "q1": round2(quantile(s, 0.25)),
            "median": round2(quantile(s, 0.5)),
            "q3": round2(quantile(s, 0.75)),
            "max": s[-1],
            "n": len(s),
        })
    return rows
