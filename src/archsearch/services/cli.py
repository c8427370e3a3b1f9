"""archsearch CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from archsearch import __version__

if TYPE_CHECKING:
    from archsearch.services.search_component import SearchComponent


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@click.group()
@click.version_option(version=__version__, prog_name="archsearch")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root holding .archsearch/ (default: current directory).",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Index data directory (default: from config.yml or '.archsearch/').",
)
@click.pass_context
def main(
    ctx: click.Context,
    *,
    verbose: bool,
    quiet: bool,
    project: Path | None,
    data_dir: Path | None,
) -> None:
    """archsearch - full-text search over architecture workspaces."""
    from archsearch.infrastructure.config import load_config

    _configure_logging(verbose=verbose, quiet=quiet)
    config = load_config(project or Path.cwd())
    if data_dir is not None:
        config.data_dir = data_dir

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["quiet"] = quiet


def _component(ctx: click.Context) -> SearchComponent:
    from archsearch.services.search_component import create_search_component

    component = create_search_component(ctx.obj["config"])
    component.start()
    ctx.call_on_close(component.stop)
    return component


@main.command()
@click.argument(
    "workspace_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def index(ctx: click.Context, workspace_files: tuple[Path, ...]) -> None:
    """(Re)index one or more workspace files (JSON or YAML)."""
    from archsearch.model.loader import WorkspaceLoadError, load_workspace
    from archsearch.services.search_component import SqliteSearchComponent

    workspaces = []
    for path in workspace_files:
        try:
            workspaces.append(load_workspace(path))
        except WorkspaceLoadError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    component = _component(ctx)
    if not isinstance(component, SqliteSearchComponent):
        click.echo("Search is disabled; nothing indexed.")
        return

    for workspace in workspaces:
        component.index(workspace)
        if not ctx.obj["quiet"]:
            count = component.store.count(workspace.id)
            click.echo(f"Workspace {workspace.id} ({workspace.name}): {count} document(s)")


@main.command()
@click.argument("query")
@click.option(
    "--workspace",
    "-w",
    "workspace_ids",
    type=int,
    multiple=True,
    help="Workspace id to search in (repeatable).",
)
@click.option(
    "--type",
    "type_filter",
    type=click.Choice(["workspace", "diagram", "documentation", "decision"], case_sensitive=False),
    default=None,
    help="Filter results by document type.",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def search(
    ctx: click.Context,
    query: str,
    *,
    workspace_ids: tuple[int, ...],
    type_filter: str | None,
    output_json: bool,
) -> None:
    """Search workspaces by keyword."""
    from archsearch.search.query import InvalidArgumentError

    component = _component(ctx)
    try:
        results = component.search(query, type_filter, set(workspace_ids))
    except InvalidArgumentError as exc:
        raise click.UsageError(f"{exc} Use --workspace.") from exc

    if output_json:
        click.echo(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
        return

    if not results:
        click.echo("No results found.")
        return

    from rich.console import Console
    from rich.table import Table

    table = Table(show_header=True, box=None, padding=(0, 1))
    table.add_column("workspace", justify="right", style="cyan")
    table.add_column("type")
    table.add_column("name", style="bold")
    table.add_column("description")
    table.add_column("url", style="dim")
    for r in results:
        table.add_row(str(r.workspace_id), r.type, r.name, r.description, r.url)
    Console().print(table)


@main.command()
@click.argument("workspace_id", type=int)
@click.pass_context
def delete(ctx: click.Context, workspace_id: int) -> None:
    """Remove every document of a workspace from the index."""
    component = _component(ctx)
    component.delete(workspace_id)
    if not ctx.obj["quiet"]:
        click.echo(f"Workspace {workspace_id} removed from the index.")


@main.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Erase the whole index."""
    component = _component(ctx)
    component.clear()
    if not ctx.obj["quiet"]:
        click.echo("Index cleared.")


@main.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, *, output_json: bool) -> None:
    """Show index location and document count."""
    from archsearch.infrastructure.store import StoreUnavailableError
    from archsearch.services.search_component import SqliteSearchComponent

    config = ctx.obj["config"]
    component = _component(ctx)
    enabled = component.is_enabled()

    documents: int | None = None
    index_path = ""
    if isinstance(component, SqliteSearchComponent):
        index_path = str(component.store.db_path)
        try:
            documents = component.store.count()
        except StoreUnavailableError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    if output_json:
        data = {
            "enabled": enabled,
            "implementation": config.implementation,
            "index_path": index_path,
            "documents": documents,
        }
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not enabled:
        click.echo("Search is disabled.")
        return
    click.echo(f"Index:     {index_path}")
    click.echo(f"Documents: {documents}")
