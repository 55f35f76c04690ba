"""symgraph serve command - run the MCP server over stdio."""

from pathlib import Path

import click


@click.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
def serve_command(path: Path | None) -> None:
    """Run the MCP server on stdio.

    If PATH holds a snapshot it is loaded at startup.
    """
    from symgraph.mcp.server import run_server

    run_server(path.resolve() if path is not None else None)
