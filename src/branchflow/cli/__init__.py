"""branchflow CLI -- terminal interface for the branch lifecycle workflows.

This is the only layer that turns a BranchflowError into an exit status:
every error is printed and the process exits with status 1.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

import click

from branchflow.cli.formatting import (
    ConsoleReporter,
    format_error,
    format_execution_error,
    get_console,
)
from branchflow.exceptions import BranchflowError, CommandExecutionError
from branchflow.logging_utils import configure_logging

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from branchflow.config_store import ConfigStore
    from branchflow.engine.backend import GitBackend
    from branchflow.flow import BranchFlow
    from branchflow.prompts import Prompter


@click.group()
@click.option(
    "--config",
    "config_path",
    default=None,
    envvar="BRANCHFLOW_CONFIG",
    help="Path to the config file (default: ./.gitflow-config.json).",
)
@click.option(
    "--repo",
    default=None,
    envvar="BRANCHFLOW_REPO",
    help="Directory git runs in (default: current directory).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Log to stderr: -v for INFO, -vv for DEBUG (default: WARNING).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, repo: str | None, verbose: int) -> None:
    """branchflow: feature/release/bugfix/hotfix branch workflows for git."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["repo"] = repo
    configure_logging(verbose)


def _get_backend(ctx: click.Context) -> GitBackend:
    """Backend from the context (tests inject one), else the git binary."""
    from branchflow.engine.backend import SubprocessGitBackend

    backend = ctx.obj.get("backend")
    if backend is None:
        backend = SubprocessGitBackend(ctx.obj.get("repo"))
    return backend


def _get_prompter(ctx: click.Context) -> Prompter:
    from branchflow.prompts import ClickPrompter

    return ctx.obj.get("prompter") or ClickPrompter()


def _get_store(ctx: click.Context) -> ConfigStore:
    from branchflow.config_store import ConfigStore

    return ConfigStore(ctx.obj.get("config_path"))


@contextmanager
def _cli_errors(console: Console) -> Iterator[None]:
    """Print any BranchflowError and exit with status 1."""
    try:
        yield
    except CommandExecutionError as e:
        format_execution_error(e, console)
        raise SystemExit(1) from None
    except BranchflowError as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


@contextmanager
def _flow_session(ctx: click.Context) -> Iterator[tuple[BranchFlow, Console]]:
    """Context manager that opens a BranchFlow and yields (flow, console).

    Loading the config may run the init wizard when no config exists.
    """
    from branchflow.flow import BranchFlow

    console = get_console()
    with _cli_errors(console):
        flow = BranchFlow.open(
            config_path=ctx.obj.get("config_path"),
            prompter=_get_prompter(ctx),
            reporter=ConsoleReporter(console),
            backend=_get_backend(ctx),
        )
        yield flow, console


def main() -> None:
    """Console-script entry point."""
    cli(obj={})


# Register subcommands after cli group is defined
from branchflow.cli.commands.init import init  # noqa: E402
from branchflow.cli.commands.lifecycle import LIFECYCLE_COMMANDS  # noqa: E402
from branchflow.cli.commands.switch import switch  # noqa: E402

cli.add_command(init)
for _command in LIFECYCLE_COMMANDS:
    cli.add_command(_command)
cli.add_command(switch)
