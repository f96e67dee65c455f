#!/usr/bin/env python3
"""
CoffeeSense CLI - inspect how a workspace resolves into projects
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from coffeesense.config import get_default_lsp_config, load_workspace_config
from coffeesense.errors import classify_exception
from coffeesense.project_discovery import find_project_for_file
from coffeesense.resolver import get_full_config
from coffeesense.utils.config_helpers import flatten_settings
from coffeesense.utils.path_utils import normalize_absolute_path

app = typer.Typer(
    name="coffeesense",
    help="Resolve CoffeeSense projects for a workspace",
    add_completion=False,
)
console = Console(stderr=False)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(exc: Exception) -> None:
    report = classify_exception(exc)
    console.print(f"[bold red]Error ({report.category.value}):[/bold red] {escape(report.message)}", style="red")
    if report.hint:
        console.print(f"[dim]{report.hint}[/dim]")
    raise typer.Exit(1)


def _resolve(workspace: Path, config: Optional[Path]):
    workspace_path = normalize_absolute_path(workspace, os.getcwd())
    if config is not None:
        config = Path(normalize_absolute_path(config, os.getcwd()))
    root_path_for_config, user_config = load_workspace_config(workspace_path, config)
    return get_full_config(root_path_for_config, workspace_path, user_config)


@app.command()
def resolve(
    workspace: Path = typer.Argument(Path("."), help="Workspace root"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the resolved configuration as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
):
    """Resolve and print the projects of a workspace."""
    _setup_logging(verbose)
    try:
        full_config = _resolve(workspace, config)
    except Exception as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(full_config.to_dict(), indent=2))
        return

    table = Table(title="CoffeeSense projects")
    table.add_column("Root", style="cyan")
    table.add_column("package.json")
    table.add_column("tsconfig")
    for project in full_config.projects:
        table.add_row(project.root, project.package or "-", project.tsconfig or "-")
    console.print(table)
    if full_config.settings:
        console.print(f"[dim]Settings:[/dim] {len(full_config.settings)} override(s)")


@app.command()
def owner(
    file: Path = typer.Argument(..., help="File to look up"),
    workspace: Path = typer.Option(
        Path("."),
        "--workspace",
        "-w",
        help="Workspace root",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
):
    """Print the project that owns FILE."""
    _setup_logging(verbose)
    try:
        full_config = _resolve(workspace, config)
    except Exception as e:
        _fail(e)

    project = find_project_for_file(full_config.projects, normalize_absolute_path(file, os.getcwd()))
    if project is None:
        console.print(f"[yellow]No project owns {file}[/yellow]")
        raise typer.Exit(1)
    typer.echo(project.root)


@app.command()
def defaults(
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print as JSON instead of YAML",
    ),
    flat: bool = typer.Option(
        False,
        "--flat",
        help="Print dotted setting keys",
    ),
):
    """Print the default language server settings."""
    lsp_config = get_default_lsp_config()
    data = flatten_settings(lsp_config) if flat else lsp_config.model_dump(by_alias=True)
    if as_json:
        typer.echo(json.dumps(data, indent=2))
    else:
        console.print(yaml.dump(data, default_flow_style=False, sort_keys=False), end="")


def main():
    app()


if __name__ == "__main__":
    main()
