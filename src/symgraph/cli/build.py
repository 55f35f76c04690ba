"""symgraph build command - scan a project and write its snapshot."""

import asyncio
from pathlib import Path

import click
from rich.table import Table

from symgraph.cli.utils import echo_json
from symgraph.config.loader import get_snapshot_path, load_config
from symgraph.config.user_config import UserConfig, write_user_config
from symgraph.core.console import get_console, spinner, status
from symgraph.core.errors import SymgraphError
from symgraph.core.formatting import format_duration, format_name_list, pluralize
from symgraph.graph.ops import GraphSession
from symgraph.parsers.ops import scan_repository


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Snapshot path (default: PATH/app.json)",
)
@click.option(
    "--write-config",
    is_flag=True,
    help="Write a commented .symgraph/config.yaml if the repo has none",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def build_command(path: Path, output: Path | None, write_config: bool, as_json: bool) -> None:
    """Scan a Swift/Objective-C project and write its symbol graph snapshot.

    PATH is the project root (default: current directory).
    """
    root = path.resolve()
    try:
        config = load_config(root)
        with spinner(f"Scanning {root.name}"):
            scan = asyncio.run(scan_repository(root, config))
        session = GraphSession()
        session.publish(scan.graph)
        snapshot = session.save(output or get_snapshot_path(root, config))
    except SymgraphError as e:
        raise click.ClickException(e.message) from e

    if write_config:
        config_path = root / ".symgraph" / "config.yaml"
        if not config_path.exists():
            write_user_config(config_path, UserConfig())
            status(f"Wrote {config_path}", style="info")

    if as_json:
        echo_json(
            {
                "repo_path": str(scan.root),
                "project": scan.project.to_dict() if scan.project else None,
                "snapshot": str(snapshot),
                "stats": scan.stats.to_dict(),
                "types": len(scan.graph.type_map),
                "edges": len(scan.graph.edges),
                "duration_seconds": round(scan.duration_seconds, 2),
            }
        )
        return

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")
    if scan.project is not None:
        table.add_row("Project", f"{scan.project.name} ({scan.project.kind})")
    table.add_row("Units", f"{scan.stats.processed}/{scan.stats.total}")
    table.add_row("Types", str(len(scan.graph.type_map)))
    table.add_row("Edges", str(len(scan.graph.edges)))
    table.add_row("Snapshot", str(snapshot))
    get_console().print(table)

    if scan.stats.errors:
        status(
            f"{pluralize(scan.stats.errors, 'unit')} failed: "
            f"{format_name_list(scan.stats.failed_units, max_shown=3)}",
            style="warning",
        )
    status(f"Built in {format_duration(scan.duration_seconds)}", style="success")
