"""Cache commands: list and clear stored survey results."""

from __future__ import annotations

import typer
from rich.table import Table

from ..context import CommandContext
from ..display.errors import handle_cli_error


app = typer.Typer(name="cache", help="Inspect and clear cached survey results")


@app.command("list")
@handle_cli_error
def list_entries(ctx: typer.Context) -> None:
    """List cached result sets."""
    context: CommandContext = ctx.obj
    entries = context.cache.entries()
    if not entries:
        context.console.print("[yellow]Cache is empty[/yellow]")
        return

    table = Table(title=f"Cache: {context.cache.cache_dir}", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Stored at")
    for entry in entries:
        table.add_row(
            str(entry.get("key")),
            str(entry.get("row_count", "-")),
            f"{entry.get('size_bytes', 0) / 1024:.1f} KB",
            str(entry.get("stored_at", "-")),
        )
    context.console.print(table)


@app.command("clear")
@handle_cli_error
def clear(
    ctx: typer.Context,
    key: str | None = typer.Argument(None, help="Entry to delete; all entries when omitted"),
) -> None:
    """Delete one cached entry, or all of them."""
    context: CommandContext = ctx.obj
    if key is None:
        removed = context.cache.clear()
        context.console.print(f"[green]✓ Removed {removed} cache entries[/green]")
        return

    if context.cache.delete(key):
        context.console.print(f"[green]✓ Removed '{key}'[/green]")
    else:
        context.console.print(f"[yellow]No cache entry named '{key}'[/yellow]")
        raise typer.Exit(code=1)


def register_command(main_app: typer.Typer) -> None:
    """Register cache commands with main app."""
    main_app.add_typer(app, name="cache")
