"""CLI entry point for Merkletrie."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from merkletrie_core.config import MerkletrieConfig, load_config
from merkletrie_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from merkletrie_core.fsnoder import DirectoryNode, NoderError, parse
from merkletrie_core.interfaces import Noder
from merkletrie_core.merkle import build_tree, diff_trees

app = typer.Typer(
    name="merkletrie",
    help="Content-addressed trees: hash, render and compare hierarchical data.",
)

config_app = typer.Typer(help="Manage Merkletrie configuration.")
app.add_typer(config_app, name="config")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Errors and log records; stdout carries command results only
err_console = Console(stderr=True)

# Global state
_config: MerkletrieConfig | None = None


class _JsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(
            {
                "level": record.levelname.lower(),
                "logger": record.name,
                "message": record.getMessage(),
            }
        )


def _configure_logging(cfg: MerkletrieConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(console=err_console, show_path=False)
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


def _get_config() -> MerkletrieConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to merkletrie.yaml")
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override the configured log level"),
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config, overrides={"log_level": log_level})
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(_config)


def _parse_or_exit(text: str) -> DirectoryNode:
    try:
        return parse(text)
    except NoderError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _node_label(node: Noder) -> str:
    label = escape(node.name) or "[dim]<root>[/dim]"
    if node.is_directory():
        label = f"[bold blue]{label}/[/bold blue]"
    return f"{label} [dim]{node.hash().hex()}[/dim]"


def _rich_tree(root: Noder) -> Tree:
    tree = Tree(_node_label(root))
    pending: list[tuple[Noder, Tree]] = [(root, tree)]
    while pending:
        node, branch = pending.pop()
        # rich keeps insertion order, so branches are added before descending
        for child in node.children():
            pending.append((child, branch.add(_node_label(child))))
    return tree


@app.command("hash")
def hash_cmd(
    tree: str = typer.Argument(..., help='Canonical tree string, e.g. "root(a<1> b())"'),
) -> None:
    """Print the hex hash of a tree."""
    node = _parse_or_exit(tree)
    typer.echo(node.hash().hex())


@app.command()
def show(
    tree: str = typer.Argument(..., help="Canonical tree string"),
) -> None:
    """Normalize a tree and display it with per-node hashes."""
    node = _parse_or_exit(tree)
    typer.echo(str(node))
    typer.echo(node.hash().hex())
    rprint(_rich_tree(node))


@app.command()
def scan(
    path: str = typer.Argument(".", help="Directory to build a tree from"),
    ignore: Annotated[
        list[str] | None,
        typer.Option("--ignore", "-i", help="Extra names to skip (repeatable)"),
    ] = None,
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: text or json")
    ] = "text",
) -> None:
    """Build a tree from a directory on disk and print its hash."""
    cfg = _get_config()
    patterns = cfg.builder.effective_ignore_patterns(ignore)

    try:
        node = build_tree(
            Path(path),
            ignore_patterns=patterns,
            follow_symlinks=cfg.builder.follow_symlinks,
        )
    except OSError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if format == "json":
        typer.echo(
            json.dumps(
                {
                    "path": str(Path(path).resolve()),
                    "hash": node.hash().hex(),
                    "children": node.child_count(),
                },
                indent=2,
            )
        )
    else:
        typer.echo(node.hash().hex())


@app.command()
def diff(
    old: str = typer.Argument(..., help="Canonical string of the old tree"),
    new: str = typer.Argument(..., help="Canonical string of the new tree"),
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: table or json")
    ] = "table",
) -> None:
    """Compare two trees and list added, removed and modified paths."""
    result = diff_trees(_parse_or_exit(old), _parse_or_exit(new))

    if format == "json":
        typer.echo(
            json.dumps(
                {
                    "added": list(result.added),
                    "removed": list(result.removed),
                    "modified": list(result.modified),
                    "root_changed": result.root_changed,
                    "old_root_hash": result.old_root_hash,
                    "new_root_hash": result.new_root_hash,
                },
                indent=2,
            )
        )
        return

    if result.is_empty:
        rprint("[green]No differences.[/green]")
        return

    table = Table(title="Tree differences")
    table.add_column("Change", justify="center")
    table.add_column("Path", style="cyan")
    for p in result.added:
        table.add_row("[green]added[/green]", escape(p))
    for p in result.removed:
        table.add_row("[red]removed[/red]", escape(p))
    for p in result.modified:
        table.add_row("[yellow]modified[/yellow]", escape(p))
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    import yaml

    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default merkletrie.yaml in current directory."""
    target = Path("merkletrie.yaml")
    if target.exists() and not force:
        err_console.print("[yellow]merkletrie.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
