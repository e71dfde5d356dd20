import json
import os
from datetime import datetime

import pandas as pd

from .calculations import compute_shift_metrics


def shift_rows(records):
    """Flat dicts of raw fields plus computed metrics, one per shift."""
    rows = []
    for r in records:
        row = r.as_dict() if hasattr(r, "as_dict") else dict(r)
        row.update(compute_shift_metrics(r).as_dict())
        rows.append(row)
    return rows


def save_results(records, out_dir=".", prefix="shifts"):
    """
    Writes a timestamped JSON + Excel snapshot of the shifts and their metrics.
    Returns (json_path, xlsx_path).
    """
    rows = shift_rows(records)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    json_path = os.path.join(out_dir, f"{prefix}_{timestamp}.json")
    xlsx_path = os.path.join(out_dir, f"{prefix}_{timestamp}.xlsx")

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2, ensure_ascii=False)

    df = pd.DataFrame(rows)
    df.to_excel(xlsx_path, index=False)

    print(f"💾 Saved {len(rows)} shifts:")
    print(f" - JSON:  {json_path}")
    print(f" - Excel: {xlsx_path}")
    return json_path, xlsx_path
