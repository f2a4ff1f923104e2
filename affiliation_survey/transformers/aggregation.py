"""Department mapping and count summaries over affiliation frames."""

from __future__ import annotations

from collections.abc import Mapping

import pandas as pd


def apply_department_mapping(
    df: pd.DataFrame,
    mapping: Mapping[str, str],
    keep_unmatched: bool = True,
    source_column: str = "department_name",
    target_column: str = "department_canonical",
) -> pd.DataFrame:
    """Return a copy of ``df`` with ``target_column`` holding canonical labels.

    Labels absent from ``mapping`` (acronyms, blanks, nulls) keep their raw
    value when ``keep_unmatched``; otherwise they become NaN.
    """
    result = df.copy()
    mapped = result[source_column].map(lambda v: mapping.get(v) if isinstance(v, str) else None)
    if keep_unmatched:
        mapped = mapped.where(mapped.notna(), result[source_column])
    result[target_column] = mapped
    return result


def summarize_by(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Counts per distinct value of ``column``, most frequent first.

    Nulls are excluded. Ties are ordered by value.
    """
    if df.empty or column not in df.columns:
        return pd.DataFrame({column: pd.Series(dtype=object), "count": pd.Series(dtype="int64")})
    counts = (
        df[column]
        .dropna()
        .value_counts()
        .rename_axis(column)
        .reset_index(name="count")
    )
    return counts.sort_values(["count", column], ascending=[False, True]).reset_index(drop=True)
