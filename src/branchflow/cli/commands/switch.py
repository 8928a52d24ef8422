"""branchflow switch -- check out an existing branch and pull it."""

from __future__ import annotations

import click
from rich.markup import escape


@click.command()
@click.argument("branch")
@click.pass_context
def switch(ctx: click.Context, branch: str) -> None:
    """Switch to BRANCH.

    BRANCH must exist locally and the working tree must be clean.
    """
    from branchflow.cli import _flow_session

    with _flow_session(ctx) as (flow, console):
        result = flow.switch(branch)
        if result.dry_run:
            console.print("[yellow]Debug mode enabled, no command was executed.[/yellow]")
        elif result.executed:
            console.print(f"Switched to branch [green]{escape(branch)}[/green]")
