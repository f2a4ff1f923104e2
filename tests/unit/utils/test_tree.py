"""Tests for nested-tree path helpers."""

import pytest

from affiliation_survey.utils.tree import first_path, get_path, iter_path


pytestmark = pytest.mark.fast


@pytest.fixture
def tree():
    return {
        "affiliation-group": [
            {"summaries": [{"employment-summary": {"role-title": "Professor"}}]},
            {"summaries": None},
            {"summaries": {"employment-summary": {"role-title": "Lecturer"}}},
        ],
        "empty": None,
    }


class TestGetPath:
    def test_nested_keys_and_indices(self, tree):
        assert (
            get_path(tree, ["affiliation-group", 0, "summaries", 0, "employment-summary", "role-title"])
            == "Professor"
        )

    def test_negative_index(self, tree):
        assert get_path(tree, ["affiliation-group", -1, "summaries"]) is not None

    @pytest.mark.parametrize(
        "path",
        [
            ["missing"],
            ["affiliation-group", 10],
            ["affiliation-group", "not-an-index"],
            ["empty", "deeper"],
            ["affiliation-group", 0, "summaries", 0, "employment-summary", "role-title", "x"],
        ],
    )
    def test_missing_returns_default(self, tree, path):
        assert get_path(tree, path, default="n/a") == "n/a"

    def test_null_leaf_returns_default(self, tree):
        assert get_path(tree, ["empty"], default="n/a") == "n/a"

    def test_empty_path_returns_tree(self, tree):
        assert get_path(tree, []) is tree

    def test_none_tree(self):
        assert get_path(None, ["a"]) is None


class TestIterPath:
    def test_wildcard_fans_out_and_skips_missing(self, tree):
        titles = list(
            iter_path(tree, ["affiliation-group", "*", "summaries", "*", "employment-summary", "role-title"])
        )
        # A single mapping where a list is expected is walked as one element
        assert titles == ["Professor", "Lecturer"]

    def test_missing_yields_nothing(self, tree):
        assert list(iter_path(tree, ["nothing", "*", "here"])) == []
        assert list(iter_path(None, ["*"])) == []

    def test_index_keyed_mapping(self):
        tree = {"items": {"0": {"v": 1}, "1": {"v": 2}}}
        assert list(iter_path(tree, ["items", "*", "v"])) == [1, 2]


class TestFirstPath:
    def test_first_non_null_wins(self):
        hit = {"orcid-identifier": {"path": None}, "orcid-id": "0000-0001"}
        paths = [["orcid-identifier", "path"], ["orcid-id"], ["path"]]
        assert first_path(hit, paths) == "0000-0001"

    def test_default_when_none_match(self):
        assert first_path({}, [["a"], ["b"]], default="x") == "x"

