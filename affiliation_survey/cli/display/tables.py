"""Rich tables for survey summaries."""

from __future__ import annotations

import pandas as pd
from rich.table import Table


def summary_table(df: pd.DataFrame, title: str, limit: int | None = 25) -> Table:
    """Two-column (value, count) table from a ``summarize_by`` frame."""
    table = Table(title=title, show_header=True)
    label_column = df.columns[0] if len(df.columns) else "value"
    table.add_column(str(label_column), style="cyan")
    table.add_column("Count", justify="right")

    rows = df if limit is None else df.head(limit)
    for label, count in rows.itertuples(index=False, name=None):
        table.add_row(str(label), str(count))
    if limit is not None and len(df) > limit:
        table.caption = f"{len(df) - limit} more not shown"
    return table


def stats_table(stats: dict[str, object], title: str) -> Table:
    """Key/value table."""
    table = Table(title=title, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in stats.items():
        table.add_row(key, str(value))
    return table
