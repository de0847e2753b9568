"""CSV export helpers for payoff projections."""

from __future__ import annotations

import csv
from pathlib import Path

from .debts import SimulationResult, add_months


def export_trajectory_csv(*, result: SimulationResult, output_path: Path, start=None) -> Path:
    """Write a projection's monthly balances to CSV at `output_path`.

    Columns: month, balance and, when *start* (a date) is given, the
    calendar month each row falls in. Returns the path written.
    """

    headers = ["month", "balance"]
    if start is not None:
        headers.append("date")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=headers, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for month, balance in result.trajectory:
            row = {"month": month, "balance": f"{balance:.2f}"}
            if start is not None:
                row["date"] = add_months(start, month).isoformat()
            writer.writerow(row)

    return output_path
