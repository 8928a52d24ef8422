"""branchflow init -- create or overwrite the workflow configuration."""

from __future__ import annotations

import click

from branchflow.cli.formatting import ConsoleReporter, get_console


@click.command()
@click.option("-y", "--yes", is_flag=True, help="No questions: use the existing or default config.")
@click.pass_context
def init(ctx: click.Context, yes: bool) -> None:
    """Initialize branchflow with custom branch names.

    Asks for the main, develop and (optional) staging branch names, saves
    them to the config file and optionally creates the branches on the
    remote.
    """
    from branchflow.cli import _cli_errors, _get_backend, _get_prompter, _get_store
    from branchflow.operations.init import run_init

    console = get_console()
    with _cli_errors(console):
        run_init(
            _get_store(ctx),
            backend=_get_backend(ctx),
            prompter=_get_prompter(ctx),
            reporter=ConsoleReporter(console),
            use_defaults=yes,
        )
