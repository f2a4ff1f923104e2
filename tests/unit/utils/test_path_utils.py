"""Tests for path utilities."""

import pytest

from affiliation_survey.utils.common.path_utils import ensure_dir, ensure_parent_dir, slugify


pytestmark = pytest.mark.fast


def test_ensure_parent_dir(tmp_path):
    target = tmp_path / "a" / "b" / "out.csv"
    ensure_parent_dir(target)
    assert target.parent.is_dir()


def test_ensure_dir_idempotent(tmp_path):
    ensure_dir(tmp_path / "x")
    ensure_dir(tmp_path / "x")
    assert (tmp_path / "x").is_dir()


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Chemistry / Employments 2024", "chemistry-employments-2024"),
        ("---", "entry"),
        ("ÉCOLE", "cole"),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected


def test_slugify_truncates():
    assert len(slugify("a" * 200, max_length=10)) == 10
