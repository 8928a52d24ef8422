"""Git backend for branchflow.

Every primitive VCS operation (checkout, branch, merge, push, tag,
rev-parse, rev-list, diff, status, ls-remote) goes through a GitBackend.
The backend only runs argv lists and reports exit status and output; it
never interprets results or raises on a non-zero exit. That is left to
the query service and the command queue.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from branchflow.exceptions import CommandExecutionError
from branchflow.models.result import CommandResult

logger = logging.getLogger(__name__)


@runtime_checkable
class GitBackend(Protocol):
    """Runs git invocations synchronously.

    ``argv`` excludes the ``git`` executable itself, e.g.
    ``["rev-parse", "--verify", "develop"]``.
    """

    def run(self, argv: Sequence[str]) -> CommandResult: ...


class SubprocessGitBackend:
    """GitBackend that shells out to the ``git`` binary.

    Calls block until git exits; there is no timeout.
    """

    def __init__(self, cwd: str | None = None, *, executable: str = "git") -> None:
        self._cwd = cwd
        self._executable = executable

    def run(self, argv: Sequence[str]) -> CommandResult:
        cmd = [self._executable, *argv]
        logger.debug("Running git command: %s", " ".join(cmd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=self._cwd,
                check=False,
                text=True,
                capture_output=True,
            )
        except OSError as exc:
            raise CommandExecutionError(" ".join(cmd), f"failed to execute git: {exc}") from exc

        if completed.returncode != 0:
            logger.debug("git exited %d: %s", completed.returncode, completed.stderr.strip())

        return CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
