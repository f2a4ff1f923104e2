"""Tests for label normalization helpers."""

import pytest

from affiliation_survey.utils.text_normalization import (
    collapse,
    is_acronym,
    is_blank,
    normalize_label,
    normalize_org_name,
)


pytestmark = pytest.mark.fast


@pytest.mark.parametrize("label", [None, "", "   ", "\t\n"])
def test_is_blank(label):
    assert is_blank(label) is True


@pytest.mark.parametrize(
    "label,expected",
    [
        ("ECE", True),
        (" EECS ", True),
        ("E.C.E.", False),
        ("Physics", False),
        ("CS 101", False),
        ("", False),
        (None, False),
    ],
)
def test_is_acronym(label, expected):
    assert is_acronym(label) is expected


def test_collapse():
    assert collapse("  Chemistry &   Biochemistry ") == "chemistry biochemistry"
    assert collapse(None) == ""


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Dept. of Computer Science", "computer science"),
        ("Department of Physics", "physics"),
        ("DEPARTMENT  Chemistry", "chemistry"),
        ("dept mathematics", "mathematics"),
        ("Departmental Studies", "departmental studies"),
        ("Department", ""),
        ("History", "history"),
    ],
)
def test_normalize_label(raw, expected):
    assert normalize_label(raw) == expected


def test_normalize_label_keeps_prefix_when_asked():
    assert normalize_label("Dept. of Physics", strip_department_prefix=False) == "dept of physics"


def test_normalize_org_name_is_case_sensitive():
    assert normalize_org_name("  Example   University ") == "Example University"
    assert normalize_org_name("example university") != normalize_org_name("Example University")
    assert normalize_org_name(None) == ""
