import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from topogroup._errors import GraphError
from topogroup._graph import Graph, SortMode, SortResult
from topogroup._io import GraphFileError, dump_dependency_graph, load_graph

from .config import ConfigError, TopogroupConfig, get_config, parse_mode

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

EXIT_CYCLES = 1
EXIT_INPUT_ERROR = 2


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Topological sorting of dependency graphs."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config() -> TopogroupConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_INPUT_ERROR) from e


def _load(file: Path | None, config: TopogroupConfig, key_path: str | None = None) -> Graph:
    """Load the graph from ``file``, falling back to [tool.topogroup].graph."""
    graph_file = file or config.graph
    if graph_file is None:
        err_console.print("[red]✗ No graph file given and no \\[tool.topogroup].graph configured[/red]")
        raise typer.Exit(code=EXIT_INPUT_ERROR)

    err_console.print(f"[cyan]Loading graph from:[/cyan] {graph_file}")
    try:
        graph = load_graph(graph_file, path=key_path or config.path)
    except (GraphFileError, GraphError) as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_INPUT_ERROR) from e
    logger.debug(f"Loaded {len(graph)} nodes from {graph_file}")
    return graph


def _format_cycle(cycle: list[Any]) -> str:
    return " -> ".join(str(key) for key in cycle)


def _report_problems(result: SortResult) -> None:
    if result.duplicates:
        err_console.print()
        err_console.print("[yellow]⚠ Conflicting values submitted under the same key:[/yellow]")
        for entry in result.duplicates:
            err_console.print(f"  [yellow]•[/yellow] {escape(str(entry.key))} ({len(entry.values)} values)")
    if result.has_cycles:
        err_console.print()
        err_console.print("[red]✗ Cycles detected:[/red]")
        for cycle in result.cycles:
            err_console.print(f"  [red]•[/red] {escape(_format_cycle(cycle))}")


def _render_levels(result: SortResult, mode: SortMode) -> None:
    table = Table(show_header=True, header_style="bold cyan", box=None)
    if mode == SortMode.GROUP:
        table.add_column("Level", justify="right", style="dim")
        table.add_column("Nodes")
        for index, level in enumerate(result.nodes):
            table.add_row(str(index), escape(", ".join(str(value) for value in level)))
    else:
        table.add_column("#", justify="right", style="dim")
        table.add_column("Node")
        for index, value in enumerate(result.nodes):
            table.add_row(str(index), escape(str(value)))
    out_console.print(Panel(table, title="[bold]Execution order[/bold]", border_style="cyan"))


@app.command()
def sort(
    file: Annotated[
        Path | None,
        typer.Argument(help="Graph file (.toml or .json). Defaults to the graph configured in pyproject.toml"),
    ] = None,
    *,
    mode_name: Annotated[
        str | None,
        typer.Option("--mode", help="'group' for dependency levels, 'flat' for a single list"),
    ] = None,
    key_path: Annotated[
        str | None,
        typer.Option("--path", help="Nested field holding each record's key (e.g. 'package.name')"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON"),
    ] = False,
) -> None:
    """Sort a graph so every dependency precedes its dependents."""
    config = _load_config()
    graph = _load(file, config, key_path)

    if mode_name is None:
        mode = config.mode or SortMode.GROUP
    else:
        try:
            mode = parse_mode(mode_name)
        except ConfigError as e:
            err_console.print(f"[red]✗ {escape(str(e))}[/red]")
            raise typer.Exit(code=EXIT_INPUT_ERROR) from e

    result = graph.sort(mode)

    if as_json:
        payload = {
            "nodes": result.nodes,
            "cycles": result.cycles,
            "duplicates": [{"key": entry.key, "values": entry.values} for entry in result.duplicates],
        }
        out_console.print_json(json.dumps(payload, default=str))
    else:
        _render_levels(result, mode)

    _report_problems(result)
    if result.has_cycles:
        raise typer.Exit(code=EXIT_CYCLES)


@app.command()
def cycles(
    file: Annotated[
        Path | None,
        typer.Argument(help="Graph file (.toml or .json). Defaults to the graph configured in pyproject.toml"),
    ] = None,
    *,
    key_path: Annotated[
        str | None,
        typer.Option("--path", help="Nested field holding each record's key (e.g. 'package.name')"),
    ] = None,
) -> None:
    """List the cycles in a graph."""
    config = _load_config()
    graph = _load(file, config, key_path)

    found = graph.cycles()
    if not found:
        err_console.print("[green]✓ No cycles[/green]")
        return

    for cycle in found:
        out_console.print(escape(_format_cycle(cycle)))
    raise typer.Exit(code=EXIT_CYCLES)


@app.command()
def export(
    file: Annotated[
        Path,
        typer.Argument(help="Graph file (.toml or .json)"),
    ],
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Output file (.toml or .json)"),
    ],
    key_path: Annotated[
        str | None,
        typer.Option("--path", help="Nested field holding each record's key (e.g. 'package.name')"),
    ] = None,
) -> None:
    """Write a graph in the nodes / dependencies format."""
    config = _load_config()
    graph = _load(file, config, key_path)

    try:
        dump_dependency_graph(graph, output)
    except GraphFileError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_INPUT_ERROR) from e

    err_console.print(f"[green]✓ Exported {len(graph)} nodes to[/green] {output}")


def main() -> None:
    app()
