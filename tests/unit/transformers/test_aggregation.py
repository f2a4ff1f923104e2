"""Tests for department mapping and count summaries."""

import pandas as pd
import pytest

from affiliation_survey.transformers.aggregation import apply_department_mapping, summarize_by


pytestmark = pytest.mark.fast


@pytest.fixture
def frame():
    return pd.DataFrame(
        {
            "identifier": ["a", "b", "c", "d", "e"],
            "department_name": ["Dept. of Physics", "Phys", "ECE", None, "Chemistry"],
        }
    )


MAPPING = {"Dept. of Physics": "Physics", "Phys": "Physics", "Chemistry": "Chemistry"}


def test_mapping_keeps_unmatched_by_default(frame):
    result = apply_department_mapping(frame, MAPPING)

    assert result["department_canonical"].tolist()[:3] == ["Physics", "Physics", "ECE"]
    assert pd.isna(result["department_canonical"].iloc[3])
    assert result["department_canonical"].iloc[4] == "Chemistry"
    assert "department_canonical" not in frame.columns


def test_mapping_drops_unmatched(frame):
    result = apply_department_mapping(frame, MAPPING, keep_unmatched=False)

    assert pd.isna(result["department_canonical"].iloc[2])
    assert result["department_canonical"].notna().sum() == 3


def test_summarize_by_sorted_descending(frame):
    mapped = apply_department_mapping(frame, MAPPING)

    summary = summarize_by(mapped, "department_canonical")

    assert summary.to_dict(orient="records") == [
        {"department_canonical": "Physics", "count": 2},
        {"department_canonical": "Chemistry", "count": 1},
        {"department_canonical": "ECE", "count": 1},
    ]


def test_summarize_empty_frame():
    summary = summarize_by(pd.DataFrame(), "department_canonical")

    assert summary.empty
    assert list(summary.columns) == ["department_canonical", "count"]
