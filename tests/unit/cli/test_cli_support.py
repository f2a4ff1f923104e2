"""Tests for CLI context construction and error display."""

import pandas as pd
import pytest
import typer
from rich.console import Console

from affiliation_survey.cli.context import CommandContext
from affiliation_survey.cli.display.errors import exit_code_for, format_error, handle_error
from affiliation_survey.cli.display.tables import stats_table, summary_table
from affiliation_survey.exceptions import (
    AuthError,
    ConfigurationError,
    RemoteError,
    ValidationError,
)
from affiliation_survey.pipeline import AffiliationSurvey


pytestmark = pytest.mark.fast


class TestCommandContext:
    def test_create_from_config(self, survey_config):
        context = CommandContext.create(config=survey_config, run_id="abc")

        assert context.run_id == "abc"
        assert str(context.cache.cache_dir) == survey_config.cache.cache_dir

    def test_default_survey_shares_cache(self, survey_config):
        context = CommandContext.create(config=survey_config)

        with context.survey("chem") as survey:
            assert isinstance(survey, AffiliationSurvey)
            assert survey.cache is context.cache
            assert survey.identifiers_key == "chem-identifiers"


class TestErrors:
    @pytest.mark.parametrize(
        "error,code",
        [
            (AuthError("bad token"), 3),
            (ConfigurationError("bad config"), 2),
            (RemoteError("down", http_status=503), 1),
            (ValidationError("bad limit"), 1),
            (RuntimeError("bug"), 1),
        ],
    )
    def test_exit_codes(self, error, code):
        assert exit_code_for(error) == code

    def test_format_error_includes_details_and_suggestions(self):
        console = Console(record=True, width=120)
        console.print(format_error(AuthError("token rejected", endpoint="/search/", http_status=401)))

        text = console.export_text()
        assert "token rejected" in text
        assert "endpoint: /search/" in text
        assert "ORCID_ACCESS_TOKEN" in text

    def test_handle_error_exits(self):
        console = Console(record=True)
        with pytest.raises(typer.Exit) as exc_info:
            handle_error(ConfigurationError("missing"), console=console)
        assert exc_info.value.exit_code == 2


class TestTables:
    def test_summary_table_truncates(self):
        df = pd.DataFrame({"department_canonical": list("abcd"), "count": [4, 3, 2, 1]})

        table = summary_table(df, "Departments", limit=2)

        assert table.row_count == 2
        assert table.caption == "2 more not shown"

    def test_stats_table(self):
        assert stats_table({"a": 1, "b": 2}, "Stats").row_count == 2
