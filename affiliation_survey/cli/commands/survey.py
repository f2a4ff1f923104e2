"""Survey commands: count, ids, enrich, classify and run."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import typer

from ...transformers.aggregation import summarize_by
from ...utils.common.path_utils import ensure_parent_dir
from ..context import CommandContext
from ..display.errors import handle_cli_error
from ..display.tables import stats_table, summary_table


NAME_OPTION = typer.Option(..., "--name", "-n", help="Survey name; keys the cached results")
ORG_OPTION = typer.Option(
    None, "--org", "-o", help="Organization name variant (repeatable); defaults to config"
)
VOCABULARY_OPTION = typer.Option(
    None, "--vocabulary", help="Reference vocabulary file; defaults to config"
)
OUTPUT_OPTION = typer.Option(None, "--output", help="Write the classified rows to this CSV file")


def _write_output(context: CommandContext, df: pd.DataFrame, output: Path | None) -> None:
    if output is None:
        return
    ensure_parent_dir(output)
    df.to_csv(output, index=False)
    context.console.print(f"[green]✓ Wrote {len(df)} rows to {output}[/green]")


@handle_cli_error
def count(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Query in the registry's search grammar"),
) -> None:
    """Print the number of records matching QUERY."""
    context: CommandContext = ctx.obj
    with context.survey("count") as survey:
        found = survey.search_client.count(query)
    context.console.print(f"[cyan]{found}[/cyan] records match")


@handle_cli_error
def ids(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Query in the registry's search grammar"),
    name: str = NAME_OPTION,
    refresh: bool = typer.Option(False, "--refresh", help="Ignore any cached sweep"),
) -> None:
    """Sweep every identifier matching QUERY and cache them under NAME."""
    context: CommandContext = ctx.obj
    with context.survey(name) as survey:
        identifiers = survey.identifiers(query, refresh=refresh)
    context.console.print(f"[green]✓ {len(identifiers)} identifiers cached for '{name}'[/green]")


@handle_cli_error
def enrich(
    ctx: typer.Context,
    name: str = NAME_OPTION,
    org: list[str] | None = ORG_OPTION,
    refresh: bool = typer.Option(False, "--refresh", help="Refetch employments"),
) -> None:
    """Fetch employments for the cached identifiers of NAME and filter them."""
    context: CommandContext = ctx.obj
    with context.survey(name) as survey:
        identifiers = survey.cached_identifiers()
        records = survey.affiliations(identifiers, refresh=refresh)
        current = survey.current_affiliations(records, org or None)

    context.console.print(
        stats_table(
            {
                "Identifiers": len(identifiers),
                "Employment records": len(records),
                "Current at organization": len(current),
            },
            title=f"Enrichment: {name}",
        )
    )


@handle_cli_error
def classify(
    ctx: typer.Context,
    name: str = NAME_OPTION,
    org: list[str] | None = ORG_OPTION,
    vocabulary: Path | None = VOCABULARY_OPTION,
    output: Path | None = OUTPUT_OPTION,
) -> None:
    """Classify departments and titles of the current affiliations of NAME."""
    context: CommandContext = ctx.obj
    with context.survey(name) as survey:
        current = survey.current_affiliations(survey.cached_affiliations(), org or None)
        classified, _ = survey.classify(current, vocabulary)

    context.console.print(
        summary_table(summarize_by(classified, "department_canonical"), "Departments")
    )
    context.console.print(summary_table(summarize_by(classified, "title_category"), "Titles"))
    _write_output(context, classified, output)


@handle_cli_error
def run(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Query in the registry's search grammar"),
    name: str = NAME_OPTION,
    org: list[str] | None = ORG_OPTION,
    vocabulary: Path | None = VOCABULARY_OPTION,
    output: Path | None = OUTPUT_OPTION,
    refresh: bool = typer.Option(False, "--refresh", help="Ignore cached results"),
) -> None:
    """Run the full survey for QUERY."""
    context: CommandContext = ctx.obj
    with context.survey(name) as survey:
        result = survey.run(query, org_variants=org or None, vocabulary=vocabulary, refresh=refresh)

    context.console.print(stats_table(result.summary(), title=f"Survey: {name}"))
    context.console.print(summary_table(result.department_summary, "Departments"))
    context.console.print(summary_table(result.title_summary, "Titles"))
    _write_output(context, result.classified, output)


def register_command(main_app: typer.Typer) -> None:
    """Register survey commands with main app."""
    main_app.command("count")(count)
    main_app.command("ids")(ids)
    main_app.command("enrich")(enrich)
    main_app.command("classify")(classify)
    main_app.command("run")(run)
