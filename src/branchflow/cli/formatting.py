"""Rich formatting helpers for the branchflow CLI.

Renders workflow events and errors for the terminal.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from branchflow.reporting import EventKind

if TYPE_CHECKING:
    from branchflow.exceptions import CommandExecutionError
    from branchflow.models.result import LifecycleResult
    from branchflow.reporting import FlowEvent


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_banner(message: str, console: Console) -> None:
    """Display a message inside a bordered box."""
    console.print(Panel(escape(message), expand=False, padding=(1, 2)))


def format_commands(title: str, commands: tuple[str, ...] | list[str], console: Console) -> None:
    """Display a numbered command listing."""
    console.print(f"[bold]{escape(title)}[/bold]")
    if not commands:
        console.print("  [dim](nothing to do)[/dim]")
        return
    width = len(str(len(commands)))
    for i, command in enumerate(commands, start=1):
        console.print(f"  [dim]{i:>{width}}.[/dim] [cyan]{escape(command)}[/cyan]")


def format_event(event: FlowEvent, console: Console) -> None:
    """Display one workflow event."""
    kind = event.kind
    message = escape(event.message)

    if kind is EventKind.BANNER:
        format_banner(event.message, console)
    elif kind is EventKind.STEP:
        console.print(f" - {message}")
    elif kind is EventKind.COMMANDS:
        format_commands(event.message, event.detail, console)
    elif kind is EventKind.CONFLICT:
        console.print(f"[bold red]{message}[/bold red]")
        for path in event.detail:
            console.print(f"  [red]{escape(path)}[/red]")
    elif kind is EventKind.WARNING:
        console.print(f"[yellow]{message}[/yellow]")
        for line in event.detail:
            console.print(f"  [dim]{escape(line)}[/dim]")
    elif kind is EventKind.SUCCESS:
        console.print(f"\n[bold green]{message}[/bold green]")
        for line in event.detail:
            console.print(f"  - {escape(line)}")
    else:
        console.print(message)
        for line in event.detail:
            console.print(f"  - {escape(line)}")


class ConsoleReporter:
    """Reporter that renders events on a rich Console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or get_console()

    def report(self, event: FlowEvent) -> None:
        format_event(event, self.console)


def format_lifecycle_result(result: LifecycleResult, console: Console) -> None:
    """Display the closing line of a start/finish workflow."""
    if result.execution.dry_run:
        console.print("[yellow]Debug mode enabled, no command was executed.[/yellow]")
        return
    console.print(f"\n[bold green]Done[/bold green] [dim]({escape(result.branch)})[/dim]")


def format_execution_error(error: CommandExecutionError, console: Console) -> None:
    """Display a failed flush: the last successful command and the failing one."""
    console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False)
    if error.last_successful is not None:
        console.print(
            f"  Last successful command: [green]{escape(error.last_successful)}[/green]",
            highlight=False,
        )
    else:
        console.print("  No command was executed before the failure.", highlight=False)
    console.print(f"  Failing command:         [red]{escape(error.command)}[/red]", highlight=False)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
