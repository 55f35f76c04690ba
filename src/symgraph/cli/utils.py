"""CLI utilities."""

import json
from pathlib import Path
from typing import Any

import click

from symgraph.config.loader import get_snapshot_path
from symgraph.core.errors import SymgraphError
from symgraph.graph.ops import GraphSession
from symgraph.graph.query import QueryEngine

snapshot_option = click.option(
    "--snapshot",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Snapshot to query (default: ./app.json, or graph.snapshot_name from config)",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")


def open_engine(snapshot: Path | None) -> QueryEngine:
    """Load a snapshot into a fresh session and return its query engine.

    Raises:
        click.ClickException: If the snapshot is missing or malformed
    """
    path = snapshot if snapshot is not None else get_snapshot_path(Path.cwd())
    session = GraphSession()
    try:
        session.load(path)
    except SymgraphError as e:
        hint = ""
        if snapshot is None:
            hint = "\nRun 'symgraph build PATH' first, or pass --snapshot."
        raise click.ClickException(f"{e.message}{hint}") from e
    return session.query()


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))
