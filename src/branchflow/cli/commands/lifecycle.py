"""branchflow <kind>:start / <kind>:finish -- branch lifecycle commands.

One start and one finish command is generated per branch kind. Names are
collected as all remaining words so that an unquoted name with a space is
rejected by validation rather than split by the shell into extra arguments.
"""

from __future__ import annotations

import click

from branchflow.cli.formatting import format_lifecycle_result
from branchflow.models.branch import BranchKind, get_descriptor

_START_HELP = {
    BranchKind.FEATURE: "Start a new feature branch from develop.",
    BranchKind.RELEASE: "Start a new release branch from develop.",
    BranchKind.BUGFIX: "Start a new bugfix branch from develop.",
    BranchKind.HOTFIX: "Start a new hotfix branch from main.",
}

_FINISH_HELP = {
    BranchKind.FEATURE: "Finish a feature branch: merge into develop (and staging).",
    BranchKind.RELEASE: "Finish a release branch: merge into main (tagged), develop (and staging).",
    BranchKind.BUGFIX: "Finish a bugfix branch: merge into develop (and staging).",
    BranchKind.HOTFIX: "Finish a hotfix branch: merge into main, develop (and staging).",
}


def _metavar(kind: BranchKind) -> str:
    return "VERSION" if get_descriptor(kind).versioned else "NAME"


def make_start_command(kind: BranchKind) -> click.Command:
    @click.command(f"{kind.value}:start", help=_START_HELP[kind])
    @click.argument("name", nargs=-1, required=True, metavar=_metavar(kind))
    @click.pass_context
    def start(ctx: click.Context, name: tuple[str, ...]) -> None:
        from branchflow.cli import _flow_session

        with _flow_session(ctx) as (flow, console):
            result = flow.start(kind, " ".join(name))
            format_lifecycle_result(result, console)

    return start


def make_finish_command(kind: BranchKind) -> click.Command:
    @click.command(f"{kind.value}:finish", help=_FINISH_HELP[kind])
    @click.argument("name", nargs=-1, required=True, metavar=_metavar(kind))
    @click.pass_context
    def finish(ctx: click.Context, name: tuple[str, ...]) -> None:
        from branchflow.cli import _flow_session

        with _flow_session(ctx) as (flow, console):
            result = flow.finish(kind, " ".join(name))
            format_lifecycle_result(result, console)

    return finish


LIFECYCLE_COMMANDS: list[click.Command] = [
    command
    for kind in BranchKind
    for command in (make_start_command(kind), make_finish_command(kind))
]
