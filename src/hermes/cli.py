"""Command line interface for Hermes."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hermes.config import AppConfig
from hermes.index.search import Searcher
from hermes.index.storage import SQLiteIndexStore
from hermes.models import IndexSyncError
from hermes.utils.text import word_count
from hermes.web.app import app as web_app
from hermes.workspace import Workspace


console = Console()
app = typer.Typer(help="Hermes - markdown workspace pages with local full-text search")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _resolve_workspace(workspace: Path | None) -> Path:
    config = AppConfig(workspace_path=workspace)
    return config.resolve_workspace(Path.cwd())


def _open_index(root: Path) -> SQLiteIndexStore:
    index_path = AppConfig().index_path(root)
    if not index_path.exists():
        raise typer.BadParameter(f"Index not found: {index_path}. Run 'hermes reindex' first.")
    try:
        return SQLiteIndexStore(index_path)
    except IndexSyncError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def show(
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace folder"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Load the workspace pages (refreshing the index) and summarise them."""
    _setup_logging(verbose)
    root = _resolve_workspace(workspace)
    result = Workspace().load_pages(root)

    if not result.pages and not result.errors:
        console.print(f"[yellow]No pages found in {root}.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Slot")
    table.add_column("Words")
    table.add_column("Preview")
    for key, content in result.pages.items():
        preview = content.strip().replace("\n", " ")
        table.add_row(key, str(word_count(content)), escape(preview[:80]))
    console.print(table)

    for message in result.errors.values():
        console.print(f"[red]{escape(message)}[/red]")


@app.command()
def reindex(
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace folder"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rebuild the search index from the markdown files on disk."""
    _setup_logging(verbose)
    root = _resolve_workspace(workspace)
    if not root.exists():
        raise typer.BadParameter(f"Workspace not found: {root}")

    result = Workspace().reindex(root)
    if not result.ok:
        console.print(f"[red]Index update failed: {escape(str(result.error))}[/red]")
        raise typer.Exit(code=1)
    console.print(f"Index updated at [bold]{result.index_path}[/bold].")


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace folder"),
    top_k: int = typer.Option(10, help="Number of results to display"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Full-text search over page titles and bodies."""
    _setup_logging(verbose)
    root = _resolve_workspace(workspace)
    store = _open_index(root)
    try:
        results = Searcher(store).search(query, top_k=top_k)
    finally:
        store.close()

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Slot")
    table.add_column("Title")
    table.add_column("Snippet")
    for result in results:
        snippet = result.snippet.replace("\n", " ")
        table.add_row(
            f"{result.score:.4f}", result.slot_key, escape(result.title), escape(snippet[:180])
        )
    console.print(table)


@app.command()
def recent(
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace folder"),
    limit: int = typer.Option(5, help="Number of pages to list"),
) -> None:
    """List indexed pages, most recently updated first."""
    root = _resolve_workspace(workspace)
    store = _open_index(root)
    try:
        documents = Searcher(store).recent(limit=limit)
    finally:
        store.close()

    if not documents:
        console.print("[yellow]Index is empty.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Slot")
    table.add_column("Title")
    table.add_column("Words")
    table.add_column("Updated")
    for doc in documents:
        table.add_row(doc.slot_key, escape(doc.title), str(doc.word_count), str(doc.updated_at))
    console.print(table)


@app.command()
def projects(
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Workspace folder"),
) -> None:
    """List project folders inside the workspace."""
    root = _resolve_workspace(workspace)
    names = Workspace().list_projects(root)
    if not names:
        console.print("[yellow]No projects found.[/yellow]")
        return
    for name in names:
        console.print(name)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    workspace: Path = typer.Option(None, "--workspace", "-w", help="Default workspace folder"),
) -> None:
    """Start the web API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    root = _resolve_workspace(workspace)
    web_app.state.workspace = root
    console.print(f"Starting web API on http://{host}:{port} (workspace: {root})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
