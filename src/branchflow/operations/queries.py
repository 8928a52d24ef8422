"""Read-only repository queries for branchflow.

Existence and cleanliness checks turn exit status or empty output into a
boolean and never raise. Structural queries (rev-parse of two refs,
rev-list counts) raise CommandExecutionError when git reports a failure.
Nothing is cached: every call asks git again.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from branchflow.engine.backend import GitBackend
from branchflow.exceptions import CommandExecutionError
from branchflow.models.result import AheadBehind, CommandResult

logger = logging.getLogger(__name__)


class BranchQueryService:
    """Thin query layer over a GitBackend."""

    def __init__(self, backend: GitBackend, *, remote: str = "origin") -> None:
        self._backend = backend
        self._remote = remote

    @property
    def remote(self) -> str:
        return self._remote

    def _checked(self, argv: Sequence[str]) -> CommandResult:
        result = self._backend.run(argv)
        if not result.ok or result.stderr.strip():
            raise CommandExecutionError("git " + " ".join(argv), result.output)
        return result

    def current_branch(self) -> str:
        """Name of the checked-out branch (empty when HEAD is detached)."""
        result = self._backend.run(["branch", "--show-current"])
        return result.stdout.strip()

    def exists_local(self, name: str) -> bool:
        result = self._backend.run(["rev-parse", "--verify", "--quiet", f"refs/heads/{name}"])
        return result.ok

    def exists_remote(self, name: str) -> bool:
        result = self._backend.run(["ls-remote", "--heads", self._remote, name])
        return result.ok and result.stdout.strip() != ""

    def rev_parse(self, ref: str) -> str:
        return self._checked(["rev-parse", ref]).stdout.strip()

    def hashes_equal(self, branch1: str, branch2: str) -> bool:
        """True when both branches point at the same commit."""
        return self.rev_parse(branch1) == self.rev_parse(branch2)

    def ahead_behind(self, branch1: str, branch2: str) -> AheadBehind:
        """Commits *branch1* has that *branch2* lacks, and vice versa."""
        result = self._checked(
            ["rev-list", "--left-right", "--count", f"{branch1}...{branch2}"]
        )
        parts = result.stdout.split()
        if len(parts) != 2:
            raise CommandExecutionError(
                f"git rev-list --left-right --count {branch1}...{branch2}",
                f"unexpected output: {result.stdout!r}",
            )
        return AheadBehind(ahead=int(parts[0]), behind=int(parts[1]))

    def working_tree_clean(self) -> bool:
        result = self._backend.run(["status", "--porcelain"])
        clean = result.ok and result.stdout.strip() == ""
        if not clean:
            logger.debug("Working tree has changes:\n%s", result.stdout)
        return clean

    def changed_paths(self) -> list[str]:
        """Paths listed by ``git status --porcelain``."""
        result = self._backend.run(["status", "--porcelain"])
        return [line[3:] for line in result.stdout.splitlines() if line.strip()]
