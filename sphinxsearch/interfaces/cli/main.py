"""
CLI Main - Typer-based command-line interface.

Usage:
    sphinxsearch search "door fault" --page 2 --sort-field updated
    sphinxsearch reindex posts_delta
    sphinxsearch version

Settings come from SPHINX_* environment variables or a .env file.
"""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from sphinxsearch.adapters import client_factory
from sphinxsearch.config import (
    ConfigurationError,
    ReindexError,
    SearchExecutionError,
    Settings,
    load_settings,
)
from sphinxsearch.domains.search import (
    Paginator,
    ResultSet,
    SearchEngine,
    SearchRequest,
    SortOrder,
)

app = typer.Typer(
    name="sphinxsearch",
    help="sphinxsearch - Sphinx search and delta re-indexing",
    add_completion=False,
)
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_settings_or_exit() -> Settings:
    try:
        return load_settings()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e.message}")
        raise typer.Exit(2)


@app.command()
def search(
    phrase: str = typer.Argument("", help="Search phrase (empty to list by sort field)"),
    page: int = typer.Option(1, "--page", "-p", min=0, help="Page number"),
    page_size: int | None = typer.Option(None, "--page-size", "-n", min=1, help="Results per page"),
    index: str = typer.Option("*", "--index", "-i", help="Space separated index names"),
    sort_field: str = typer.Option("", "--sort-field", "-s", help="Attribute to sort by"),
    ascending: bool = typer.Option(False, "--asc/--desc", help="Sort direction"),
    max_links: int = typer.Option(10, "--max-links", help="Page links to show"),
) -> None:
    """Search the configured indexes and show one page of document ids."""
    settings = _load_settings_or_exit()

    paginator = Paginator(page_size or settings.search_page_size, page)
    request = SearchRequest(
        phrase=phrase or None,
        index_names=index,
        sort_field=sort_field,
        sort_order=SortOrder.ASCENDING if ascending else SortOrder.DESCENDING,
    ).for_page(paginator)

    engine = SearchEngine(settings, client_factory(settings))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Searching...", total=None)
        try:
            result = asyncio.run(engine.search(request))
        except SearchExecutionError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)

    paginator.total_found = result.total_found
    _print_results(request, result, paginator, max_links)


def _print_results(
    request: SearchRequest,
    result: ResultSet,
    paginator: Paginator,
    max_links: int,
) -> None:
    """Render ids and page navigation."""
    if not result.ids:
        console.print(f"\n[yellow]No matches for:[/yellow] {request.phrase or '(all)'}")
        return

    table = Table(title=f"Page {paginator.current_page} of {paginator.num_pages}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Document ID", style="cyan", justify="right")
    for position, doc_id in enumerate(result.ids, start=request.offset + 1):
        table.add_row(str(position), str(doc_id))
    console.print(table)

    console.print(f"[dim]{result.total_found} matches in total[/dim]")

    if paginator.is_paginating:
        links = " ".join(
            f"[bold]{n}[/bold]" if n == paginator.current_page else str(n)
            for n in paginator.page_list(max_links)
        )
        prev_marker = "«" if paginator.has_previous_page else " "
        next_marker = "»" if paginator.has_next_page else " "
        console.print(f"{prev_marker} {links} {next_marker}")


@app.command()
def reindex(
    index_name: str | None = typer.Argument(None, help="Delta index (default: SPHINX_DELTA_INDEX)"),
) -> None:
    """Rebuild and rotate a delta index."""
    settings = _load_settings_or_exit()
    engine = SearchEngine(settings, client_factory(settings))
    target = index_name or engine.delta_index_name

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Re-indexing {target}...", total=None)
        try:
            outcome = engine.reindex_delta(target)
        except ReindexError as e:
            detail = e.outcome.error_detail if e.outcome else e.message
            console.print(Panel(detail or "", title=f"Re-index of {target} failed", style="red"))
            raise typer.Exit(1)

    console.print(f"[green]Re-indexed[/green] {outcome.index_name}")


@app.command()
def version() -> None:
    """Show version information."""
    from sphinxsearch import __version__

    console.print(f"sphinxsearch v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
