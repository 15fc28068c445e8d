"""CLI application for StudioVault using Rich and Typer."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from studiovault.core.config import RECENT_LIMIT, STUDIOVAULT_HUB_DIR
from studiovault.core.errors import SecurityRejection, VaultValidationError
from studiovault.core.service import VaultService
from studiovault.core.types import EntryMetadata, OperationResult

app = typer.Typer(
    name="studiovault",
    help="StudioVault CLI - browse and edit a document vault",
    no_args_is_help=True,
)

console = Console()


def _get_vault_path(vault: Optional[str]) -> Optional[Path]:
    """Resolve vault path from argument, env var, or the default hub."""
    if vault:
        path = Path(vault).expanduser()
        if path.is_dir():
            return path
        console.print(f"[red]Vault path not found: {vault}[/red]")
        return None

    env_vault = os.environ.get("STUDIOVAULT_VAULT")
    if env_vault:
        path = Path(env_vault).expanduser()
        if path.is_dir():
            return path

    STUDIOVAULT_HUB_DIR.mkdir(parents=True, exist_ok=True)
    return STUDIOVAULT_HUB_DIR


def _open_service(ctx: typer.Context) -> VaultService:
    vault_path = _get_vault_path(ctx.obj.get("vault") if ctx.obj else None)
    if vault_path is None:
        raise typer.Exit(1)
    return VaultService(vault_path)


def _resolve(service: VaultService, path: Optional[str]) -> str:
    """Paths on the command line are relative to the vault root."""
    root = str(service.root)
    if not path:
        return root
    return path if os.path.isabs(path) else os.path.join(root, path)


def _relative(service: VaultService, path: str) -> str:
    return os.path.relpath(path, str(service.root))


def _format_size(size: Optional[int]) -> str:
    if size is None:
        return ""
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KB"


def print_entries(title: str, entries: list[EntryMetadata], service: VaultService):
    """Print entries as a table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Size", justify="right")
    table.add_column("Created", style="dim")

    for entry in entries:
        name = entry.name + "/" if entry.is_directory else _relative(service, entry.path)
        created = entry.created_at.strftime("%Y-%m-%d %H:%M") if entry.created_at else ""
        table.add_row(
            name,
            entry.attributes.title or "",
            entry.attributes.status or "",
            _format_size(entry.size),
            created,
        )

    console.print(table)


def _report(result: OperationResult, service: VaultService, label: str):
    if result.success and result.path:
        console.print(f"[green]{label} created: {_relative(service, result.path)}[/green]")
        return
    console.print(f"[red]Error: {result.error}[/red]")
    raise typer.Exit(1)


@app.command("ls")
def list_directory(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="Folder inside the vault"),
):
    """List a folder (default: the vault root)."""
    service = _open_service(ctx)
    target = _resolve(service, path)
    result = asyncio.run(service.scanner.scan_detailed(target))

    if not result.ok:
        console.print(f"[red]Cannot list {path or '.'}: {result.status.value}[/red]")
        raise typer.Exit(1)
    if not result.entries:
        console.print("[dim]Empty folder.[/dim]")
        return
    print_entries(_relative(service, target), result.entries, service)


@app.command()
def recent(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="Subtree to search"),
    limit: int = typer.Option(RECENT_LIMIT, "--limit", "-n", help="Maximum documents"),
    exclude_direct: bool = typer.Option(
        False,
        "--exclude-direct",
        help="Skip documents sitting directly in the folder",
    ),
):
    """Show the most recently created documents."""
    service = _open_service(ctx)
    entries = asyncio.run(
        service.list_recent_documents(
            _resolve(service, path),
            limit,
            exclude_direct_descendants=exclude_direct,
        )
    )
    if not entries:
        console.print("[dim]No documents yet.[/dim]")
        return
    print_entries("Recent documents", entries, service)


@app.command()
def cat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Document inside the vault"),
    raw: bool = typer.Option(False, "--raw", help="Print without Markdown rendering"),
):
    """Print a document."""
    service = _open_service(ctx)
    try:
        content = asyncio.run(service.read_document(_resolve(service, path)))
    except (SecurityRejection, VaultValidationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e.strerror or e}[/red]")
        raise typer.Exit(1)

    if raw:
        console.print(content, markup=False, highlight=False)
    else:
        console.print(Panel(Markdown(content), title=path, border_style="blue"))


@app.command()
def new(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Document name"),
    folder: Optional[str] = typer.Option(None, "--in", help="Target folder"),
    content: Optional[str] = typer.Option(
        None, "--content", "-c", help="Initial content (default: template)"
    ),
):
    """Create a document."""
    service = _open_service(ctx)
    result = asyncio.run(
        service.create_document(_resolve(service, folder), name, content)
    )
    _report(result, service, "Document")


@app.command()
def mkdir(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Folder name"),
    folder: Optional[str] = typer.Option(None, "--in", help="Parent folder"),
):
    """Create a folder."""
    service = _open_service(ctx)
    result = asyncio.run(service.create_folder(_resolve(service, folder), name))
    _report(result, service, "Folder")


@app.command()
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File or folder inside the vault"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a file, or a folder with everything in it."""
    service = _open_service(ctx)
    target = _resolve(service, path)
    is_folder = os.path.isdir(target) and not os.path.islink(target)

    if is_folder and not yes:
        typer.confirm(f"Delete folder {path} and everything in it?", abort=True)

    if is_folder:
        deleted = asyncio.run(service.delete_folder(target))
    else:
        deleted = asyncio.run(service.delete_file(target))

    if not deleted:
        console.print(f"[red]Could not delete {path}[/red]")
        raise typer.Exit(1)
    console.print(f"[yellow]Deleted {path}[/yellow]")


@app.command()
def mv(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File or folder inside the vault"),
    new_name: str = typer.Argument(..., help="New name (same folder)"),
):
    """Rename a file or folder in place."""
    service = _open_service(ctx)
    new_path = asyncio.run(service.rename(_resolve(service, path), new_name))
    if new_path is None:
        console.print(f"[red]Could not rename {path}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Renamed to {_relative(service, new_path)}[/green]")


@app.command()
def workspace(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Workspace name"),
):
    """Create a top-level workspace folder."""
    service = _open_service(ctx)
    path = asyncio.run(service.create_workspace(name))
    if path is None:
        console.print(f"[red]Invalid workspace name: {name}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Workspace ready: {_relative(service, path)}[/green]")


@app.callback()
def main(
    ctx: typer.Context,
    vault: Optional[str] = typer.Option(
        None,
        "--vault",
        "-v",
        help="Vault directory (default: $STUDIOVAULT_VAULT or ~/Documents/StudioVault)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
):
    """StudioVault CLI - browse and edit a document vault."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        console.print("[dim]Debug logging enabled[/dim]")
    ctx.obj = {"vault": vault}


def run_cli(args: Optional[list[str]] = None):
    """Entry point for the CLI."""
    app(args=args)


if __name__ == "__main__":
    run_cli()
