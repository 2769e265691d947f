"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich import print
from rich.table import Table
from rich.tree import Tree

from .app import DriveSession
from .application.services.breadcrumbs import breadcrumb_text
from .application.use_cases.base import UseCaseResponse
from .appctx import create_session
from .config import ALL_VIEW_ID, SYSTEM_VIEW_IDS, TRASH_VIEW_ID
from .domain.models import (
    AssetFilters,
    EmptyState,
    FolderNode,
    Rule,
    SearchRequest,
    SortKey,
    SystemView,
    parse_view_id,
)
from .errors import CbxDriveError
from .utils.logging import ensure_console_logger, get_logger

app = typer.Typer(help="Virtual drive: folders, smart folders and bulk asset operations")
smart_app = typer.Typer(help="Manage smart folders")
app.add_typer(smart_app, name="smart")

_EMPTY_MESSAGES = {
    EmptyState.TRASH: "Trash is empty.",
    EmptyState.PURCHASES: "No purchases yet.",
    EmptyState.NO_RESULTS: "No results match the current search and filters.",
    EmptyState.EMPTY_VIEW: "This folder is empty.",
}


def _session(ctx: typer.Context) -> DriveSession:
    session = ctx.obj.get("session") if ctx.obj else None
    if session is None:
        session = create_session(ctx.obj.get("store_path") if ctx.obj else None)
        ctx.ensure_object(dict)["session"] = session
    return session


@contextmanager
def _viewing(session: DriveSession, view_id: str) -> Iterator[None]:
    """Switch to *view_id* for the block, then return to the previous view."""

    previous = session.view_id
    if previous == view_id:
        yield
        return
    session.navigate(view_id)
    try:
        yield
    finally:
        session.navigate(previous)


def _check(result: UseCaseResponse) -> None:
    if not result.success:
        typer.echo(f"Error: {result.error}", err=True)
        raise typer.Exit(1)


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except CbxDriveError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(
    ctx: typer.Context,
    store: Optional[Path] = typer.Option(None, "--store", help="Path of the JSON store file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    ensure_console_logger(
        get_logger(), "cbxdrive-cli", level=logging.DEBUG if verbose else logging.WARNING
    )
    ctx.ensure_object(dict)["store_path"] = store


@app.command()
@_handle_errors
def tree(ctx: typer.Context) -> None:
    """Show system views, smart folders and the folder tree with counts."""

    session = _session(ctx)
    root = Tree("[bold]Drive")
    views = root.add("Views")
    for view in SystemView:
        views.add(f"{view.label} [dim]({session.count(view.value)})")
    smart = root.add("Smart folders")
    for definition in session.smart_folders.definitions:
        smart.add(f"{definition.name} [dim]{definition.id} ({session.count(definition.id)})")
    folders = root.add("Folders")

    def add_nodes(branch: Tree, nodes: List[FolderNode]) -> None:
        for node in nodes:
            star = "★ " if node.id in session.starred else ""
            child = branch.add(f"{star}{node.name} [dim]{node.id} ({session.count(node.id)})")
            add_nodes(child, node.children)

    add_nodes(folders, list(session.tree.roots))
    print(root)


@app.command("ls")
@_handle_errors
def list_assets(
    ctx: typer.Context,
    view: str = typer.Argument(ALL_VIEW_ID, help="View id: folder, smart:..., or a system view"),
    query: str = typer.Option("", "--query", "-q", help="Search title, filename and tags"),
    color: List[str] = typer.Option([], "--color", help="Only these colors"),
    ratio: List[str] = typer.Option([], "--ratio", help="Only these aspect ratios"),
    orientation: Optional[str] = typer.Option(None, "--orientation"),
    favorites_only: bool = typer.Option(False, "--favorites-only"),
    sort: Optional[SortKey] = typer.Option(None, "--sort", case_sensitive=False),
) -> None:
    """List the assets of a view after search, filters and sort."""

    session = _session(ctx)
    resolved_view = session.normalize_view_id(view)
    target = parse_view_id(resolved_view)
    if resolved_view != view:
        typer.echo(f"Unknown view {view!r}; showing {resolved_view}", err=True)
    request = SearchRequest(
        query=query,
        filters=AssetFilters(
            colors=frozenset(color),
            ratios=frozenset(ratio),
            orientation=orientation,
            favorites_only=favorites_only,
        ),
        sort=sort or session.sort,
    )

    crumb = session.breadcrumb(target)
    title = breadcrumb_text(crumb) if len(crumb) else session.label_for(resolved_view)
    items = session.visible_items(request, target)
    if not items:
        print(f"[bold]{title}")
        print(f"[yellow]{_EMPTY_MESSAGES.get(session.empty_state(request, target), 'Nothing to show.')}")
        return

    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Ratio")
    table.add_column("Color")
    table.add_column("Folder")
    table.add_column("★")
    for asset in items:
        table.add_row(
            str(asset.id),
            asset.title,
            asset.ratio,
            asset.color,
            session.resolved.placement_of(asset.id) or "",
            "★" if asset.id in session.favorites else "",
        )
    print(table)


@app.command()
@_handle_errors
def mkdir(
    ctx: typer.Context,
    name: str,
    parent: Optional[str] = typer.Option(None, "--parent", "-p", help="Parent folder id"),
) -> None:
    """Create a folder."""

    result = _session(ctx).create_folder(name, parent)
    _check(result)
    print(f"[green]Created folder {result.folder_id}")


@app.command()
@_handle_errors
def rename(ctx: typer.Context, folder_id: str, name: str) -> None:
    """Rename a folder."""

    _check(_session(ctx).rename_folder(folder_id, name))
    print(f"[green]Renamed {folder_id}")


@app.command()
@_handle_errors
def rmdir(ctx: typer.Context, folder_id: str) -> None:
    """Delete a folder and its subfolders."""

    result = _session(ctx).delete_folder(folder_id)
    _check(result)
    print(f"[green]Deleted {len(result.removed_ids)} folder(s)")


@app.command()
@_handle_errors
def mv(ctx: typer.Context, target: str, asset_ids: List[int]) -> None:
    """Move assets into a folder."""

    result = _session(ctx).selection.move(asset_ids, target)
    _check(result)
    print(f"[green]Moved {len(result.affected_ids)} asset(s) to {target}")


@app.command()
@_handle_errors
def fav(ctx: typer.Context, asset_ids: List[int]) -> None:
    """Toggle the favorite flag of each asset."""

    session = _session(ctx)
    _check(session.selection.toggle_favorite(asset_ids))
    for asset_id in asset_ids:
        state = "favorite" if asset_id in session.favorites else "not favorite"
        print(f"{asset_id}: {state}")


@app.command()
@_handle_errors
def rm(ctx: typer.Context, asset_ids: List[int]) -> None:
    """Move assets to the trash."""

    session = _session(ctx)
    # Trashing from inside the trash view is a no-op.
    if session.view_id == TRASH_VIEW_ID:
        with _viewing(session, ALL_VIEW_ID):
            result = session.selection.soft_delete(asset_ids)
    else:
        result = session.selection.soft_delete(asset_ids)
    _check(result)
    print(f"[green]Trashed {len(result.affected_ids)} asset(s)")


@app.command()
@_handle_errors
def restore(ctx: typer.Context, target: str, asset_ids: List[int]) -> None:
    """Restore trashed assets into a folder."""

    session = _session(ctx)
    with _viewing(session, TRASH_VIEW_ID):
        result = session.selection.restore(asset_ids, target)
    _check(result)
    print(f"[green]Restored {len(result.affected_ids)} asset(s) to {target}")


@app.command()
@_handle_errors
def cover(ctx: typer.Context, folder_id: str, asset_id: int) -> None:
    """Set the cover asset of a folder."""

    if not _session(ctx).set_folder_cover(folder_id, asset_id):
        typer.echo(f"Error: cannot use asset {asset_id} as cover of {folder_id}", err=True)
        raise typer.Exit(1)
    print(f"[green]Set cover of {folder_id} to {asset_id}")


@app.command()
@_handle_errors
def star(ctx: typer.Context, folder_id: str) -> None:
    """Star or unstar a folder."""

    session = _session(ctx)
    if folder_id in SYSTEM_VIEW_IDS or not session.is_real_folder(folder_id):
        typer.echo(f"Error: unknown folder {folder_id}", err=True)
        raise typer.Exit(1)
    starred = session.toggle_starred(folder_id)
    print(f"[green]{'Starred' if starred else 'Unstarred'} {folder_id}")


def _parse_rule(raw: str) -> Rule:
    field_name, sep, rest = raw.partition(":")
    operator, sep2, value = rest.partition(":")
    if not sep or not sep2:
        raise typer.BadParameter(f"Rules look like field:op:value, got {raw!r}")
    return Rule(field_name.strip(), operator.strip(), value)


@smart_app.command("list")
@_handle_errors
def smart_list(ctx: typer.Context) -> None:
    """List smart folders and their rules."""

    session = _session(ctx)
    table = Table(title="Smart folders")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Rules")
    table.add_column("Items", justify="right")
    for definition in session.smart_folders.definitions:
        rules = ", ".join(f"{r.field} {r.operator} {r.value}" for r in definition.rules)
        table.add_row(definition.id, definition.name, rules, str(session.count(definition.id)))
    print(table)


@smart_app.command("create")
@_handle_errors
def smart_create(
    ctx: typer.Context,
    name: str,
    rule: List[str] = typer.Option([], "--rule", "-r", help="field:op:value, repeatable"),
) -> None:
    """Create a smart folder from one or more rules."""

    result = _session(ctx).create_smart_folder(name, [_parse_rule(r) for r in rule])
    _check(result)
    print(f"[green]Created smart folder {result.folder_id}")


@smart_app.command("rename")
@_handle_errors
def smart_rename(ctx: typer.Context, definition_id: str, name: str) -> None:
    """Rename a smart folder."""

    _check(_session(ctx).rename_smart_folder(definition_id, name))
    print(f"[green]Renamed {definition_id}")


@smart_app.command("duplicate")
@_handle_errors
def smart_duplicate(ctx: typer.Context, definition_id: str) -> None:
    """Duplicate a smart folder."""

    result = _session(ctx).duplicate_smart_folder(definition_id)
    _check(result)
    print(f"[green]Created smart folder {result.folder_id}")


@smart_app.command("rm")
@_handle_errors
def smart_rm(ctx: typer.Context, definition_id: str) -> None:
    """Delete a smart folder."""

    _check(_session(ctx).delete_smart_folder(definition_id))
    print(f"[green]Deleted {definition_id}")


if __name__ == "__main__":  # pragma: no cover
    app()
