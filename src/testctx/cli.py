import json
import logging

from dataclasses import asdict
from pathlib import Path
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from typing import Optional

import typer

from testctx import __version__
from testctx.bundle import ContextBundleBuilder
from testctx.calls import extract_call_sites
from testctx.config import load_engine_config
from testctx.errors import ContextError, NotFoundError, SourceReadError
from testctx.locator import find_declaration, find_namespace
from testctx.parsers import get_parser_for_file

app = typer.Typer(
    help="testctx - extract a function and everything it calls for test generation",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _parse_file(file_path: Path):
    """Read and parse a source file, returning (parser, source, tree)."""
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    parser = get_parser_for_file(file_path)
    if parser is None:
        raise ValueError(f"Unsupported file type: {file_path}")

    source = file_path.read_bytes()
    return parser, source, parser.parse(source)


@app.command()
def bundle(
    file_path: str,
    function_name: str,
    directory: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Project directory the oracle runs in"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Build the context bundle for a function or method.

    Args:
        file_path: Go file containing the target declaration
        function_name: Name of the function or method
    """
    project_dir = directory or Path.cwd()
    config = load_engine_config(project_dir)

    parser = get_parser_for_file(Path(file_path))
    if parser is None:
        typer.echo(f"Error: Unsupported file type: {file_path}", err=True)
        raise typer.Exit(code=1)

    try:
        result = ContextBundleBuilder(config, parser=parser).build(file_path, function_name)
    except (SourceReadError, NotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    for diagnostic in result.diagnostics:
        err_console.print(
            f"[yellow]skipped[/yellow] {diagnostic.call_name}: "
            f"{diagnostic.error}: {diagnostic.message}"
        )

    if json_output:
        typer.echo(json.dumps(asdict(result), indent=2))
        return

    console.print(f"[bold]package[/bold] {result.namespace}")
    console.print(Panel(
        Syntax(result.target.render(), "go"),
        title=f"target: {result.target.name}",
    ))
    for dependency in result.dependencies:
        console.print(Panel(Syntax(dependency, "go"), title="dependency"))


@app.command()
def calls(
    file_path: str,
    function_name: str,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List the distinct calls made by a function, without resolving them.

    Args:
        file_path: Go file containing the target declaration
        function_name: Name of the function or method
    """
    try:
        parser, source, tree = _parse_file(Path(file_path))
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except ContextError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    located = find_declaration(tree.root_node, source, function_name, parser.profile)
    if located is None:
        typer.echo(f"Error: Function '{function_name}' not found in {file_path}", err=True)
        raise typer.Exit(code=1)

    body = located.node.child_by_field_name(parser.profile.body_field)
    sites = extract_call_sites(body, source, parser.profile)

    if json_output:
        typer.echo(json.dumps([asdict(site) for site in sites], indent=2))
        return

    table = Table(title=f"Calls in {function_name}")
    table.add_column("Name")
    table.add_column("Line", justify="right")
    table.add_column("Column", justify="right")
    for site in sites:
        # Shown one-based, as an editor would
        table.add_row(site.name, str(site.position.row + 1), str(site.position.column + 1))
    console.print(table)


@app.command()
def namespace(file_path: str):
    """Print the package a Go file declares.

    Args:
        file_path: Go file to inspect
    """
    try:
        parser, source, tree = _parse_file(Path(file_path))
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except ContextError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(find_namespace(tree.root_node, source, parser.profile))


def _version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"testctx version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log oracle calls and skipped symbols"),
):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )
