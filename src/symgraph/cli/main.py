"""Symgraph CLI - symgraph command."""

import click

from symgraph.cli.build import build_command
from symgraph.cli.query import explain_command, overview_command, search_command, stats_command
from symgraph.cli.serve import serve_command
from symgraph.core.logging import configure_logging, request_scope


@click.group()
@click.version_option(version="0.1.0", prog_name="symgraph")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Symgraph - symbol graphs for Swift and Objective-C projects."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")
    ctx.with_resource(request_scope())


cli.add_command(build_command, name="build")
cli.add_command(explain_command, name="explain")
cli.add_command(search_command, name="search")
cli.add_command(stats_command, name="stats")
cli.add_command(overview_command, name="overview")
cli.add_command(serve_command, name="serve")


if __name__ == "__main__":
    cli()
