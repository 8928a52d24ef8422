"""Merge conflict detection for branchflow.

Inspects the working tree for unmerged paths at the moment it is called.
It knows nothing about the command queue: a merge that is only queued has
not touched the working tree yet.
"""

from __future__ import annotations

import logging

from branchflow.engine.backend import GitBackend
from branchflow.exceptions import CommandExecutionError
from branchflow.reporting import EventKind, NullReporter, Reporter, emit

logger = logging.getLogger(__name__)

_UNMERGED_ARGV = ["diff", "--name-only", "--diff-filter=U"]


class ConflictDetector:
    def __init__(self, backend: GitBackend, reporter: Reporter | None = None) -> None:
        self._backend = backend
        self._reporter = reporter or NullReporter()

    def unmerged_paths(self) -> list[str]:
        """Paths git currently reports as unmerged."""
        result = self._backend.run(_UNMERGED_ARGV)
        if not result.ok or result.stderr.strip():
            raise CommandExecutionError("git " + " ".join(_UNMERGED_ARGV), result.output)
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def detect(self) -> list[str]:
        """Report and return the unmerged paths (empty when clean)."""
        paths = self.unmerged_paths()
        if paths:
            logger.info("Unmerged paths: %s", ", ".join(paths))
            emit(self._reporter, EventKind.CONFLICT, "Merge conflicts detected in:", paths)
        else:
            emit(self._reporter, EventKind.INFO, "No merge conflicts detected.")
        return paths

    def has_conflicts(self) -> bool:
        return bool(self.detect())
