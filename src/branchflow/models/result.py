"""Result models for branchflow.

CommandResult is what the git backend hands back for a single invocation.
ExecutionResult and LifecycleResult are returned by queue flushes and by
the lifecycle workflows respectively.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from branchflow.models.branch import BranchKind


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of one git invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """stderr when git wrote anything there, stdout otherwise."""
        return self.stderr if self.stderr.strip() else self.stdout


@dataclass(frozen=True)
class AheadBehind:
    """Commit counts from ``git rev-list --left-right --count a...b``."""

    ahead: int
    behind: int


class ExecutionResult(BaseModel):
    """Outcome of flushing a command queue."""

    commands: list[str] = []
    executed: list[str] = []
    dry_run: bool = False


class LifecycleResult(BaseModel):
    """Outcome of a start/finish workflow."""

    kind: BranchKind
    branch: str
    base: str
    merge_targets: list[str] = []
    tag: Optional[str] = None
    execution: ExecutionResult
