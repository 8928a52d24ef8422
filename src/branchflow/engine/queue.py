"""Command queue for branchflow.

Workflows append git commands to a CommandQueue while they inspect the
repository, then flush it once. Flushing runs the commands strictly in
order and stops at the first non-zero exit. Commands that already ran stay
applied; there is no rollback.

A queue belongs to exactly one workflow invocation and is never shared.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field

from branchflow.engine.backend import GitBackend
from branchflow.exceptions import CommandExecutionError
from branchflow.models.result import ExecutionResult
from branchflow.reporting import EventKind, NullReporter, Reporter, emit

logger = logging.getLogger(__name__)


def to_argv(command: str) -> list[str]:
    """Split a queued command string into backend argv (without ``git``)."""
    tokens = shlex.split(command)
    if tokens and tokens[0] == "git":
        tokens = tokens[1:]
    return tokens


class CommandQueue:
    """Ordered, append-only buffer of git command strings."""

    def __init__(self) -> None:
        self._commands: list[str] = []

    def enqueue(self, command: str) -> None:
        """Append *command*. Its meaning is not checked."""
        logger.debug("Queued: %s", command)
        self._commands.append(command)

    @property
    def commands(self) -> list[str]:
        return list(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def clear(self) -> None:
        self._commands.clear()

    def flush(
        self,
        backend: GitBackend,
        *,
        dry_run: bool = False,
        reporter: Reporter | None = None,
    ) -> ExecutionResult:
        """Execute all queued commands in order.

        In dry-run mode nothing reaches the backend; the planned commands
        are reported and returned.

        Raises:
            CommandExecutionError: On the first command that exits non-zero.
                The remaining commands are left in the queue.
        """
        reporter = reporter or NullReporter()
        planned = self.commands

        if dry_run:
            emit(reporter, EventKind.COMMANDS, "Dry run, commands not executed:", planned)
            logger.info("Dry run: %d command(s) not executed", len(planned))
            self.clear()
            return ExecutionResult(commands=planned, executed=[], dry_run=True)

        if planned:
            emit(reporter, EventKind.COMMANDS, "Running commands...", planned)

        executed: list[str] = []
        for command in planned:
            result = backend.run(to_argv(command))
            if not result.ok:
                logger.warning(
                    "Aborting after %d of %d command(s): %s",
                    len(executed), len(planned), command,
                )
                self._commands = self._commands[len(executed):]
                raise CommandExecutionError(command, result.output, executed)
            executed.append(command)
            logger.debug("Done: %s", command)

        self.clear()
        return ExecutionResult(commands=planned, executed=executed, dry_run=False)


@dataclass
class Plan:
    """A queue plus the branch its commands will leave checked out.

    ``head`` is None until a checkout or branch switch has been queued;
    until then the live current branch applies.
    """

    queue: CommandQueue = field(default_factory=CommandQueue)
    head: str | None = None
