"""Branchflow exception hierarchy.

All branchflow-specific exceptions inherit from BranchflowError. None of them
are recovered inside the package; the CLI turns them into exit status 1.
"""

from __future__ import annotations


class BranchflowError(Exception):
    """Base exception for all branchflow errors."""


class ConfigurationError(BranchflowError):
    """Raised when the workflow configuration is missing or invalid."""


class InitDeclinedError(ConfigurationError):
    """Raised when no configuration exists and the user declines to create one."""

    def __init__(self) -> None:
        super().__init__("No configuration found. Run 'branchflow init' first.")


class InitCancelledError(ConfigurationError):
    """Raised when the user refuses to overwrite an existing configuration."""

    def __init__(self) -> None:
        super().__init__("Initialization cancelled.")


class InputValidationError(BranchflowError):
    """Raised when a branch name or version typed by the user is invalid.

    Named InputValidationError (not ValidationError) to avoid
    collision with pydantic.ValidationError.
    """


class InvalidBranchNameError(InputValidationError):
    """Raised when a branch name violates naming rules."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid branch name '{name}': {reason}")


class InvalidVersionError(InputValidationError):
    """Raised when a release version is not a strict X.Y.Z version."""

    def __init__(self, version: str, reason: str) -> None:
        self.version = version
        self.reason = reason
        super().__init__(f"Invalid version '{version}': {reason}")


class StateError(BranchflowError):
    """Base exception for repository state that forbids an operation."""


class BranchExistsError(StateError):
    """Raised when starting a branch that already exists locally."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(f"Branch already exists: {branch_name}")


class BranchNotFoundError(StateError):
    """Raised when a branch does not exist locally."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(f"Branch does not exist: {branch_name}")


class NoCommitsError(StateError):
    """Raised when finishing a branch whose tip equals its base branch."""

    def __init__(self, branch_name: str) -> None:
        self.branch_name = branch_name
        super().__init__(f"No commits yet on {branch_name}")


class DirtyWorkingTreeError(StateError):
    """Raised when switching branches with uncommitted changes."""

    def __init__(self) -> None:
        super().__init__(
            "Uncommitted changes exist. Please commit or stash your changes "
            "before switching branches."
        )


class MergeConflictError(BranchflowError):
    """Raised when unresolved paths are found after a merge step.

    Manual resolution is required; steps queued before the conflict are
    not rolled back.
    """

    def __init__(self, source: str, target: str, paths: list[str]) -> None:
        self.source = source
        self.target = target
        self.paths = paths
        super().__init__(
            f"Merge conflicts merging '{source}' into '{target}' "
            f"({len(paths)} path(s): {', '.join(paths)}). "
            f"Please resolve merge conflicts and try again."
        )


class CommandExecutionError(BranchflowError):
    """Raised when the git backend exits non-zero.

    Carries the failing command, its stderr (or stdout when stderr is
    empty) and the commands that had already completed.
    """

    def __init__(
        self, command: str, output: str, executed: list[str] | None = None
    ) -> None:
        self.command = command
        self.output = output
        self.executed = list(executed or [])
        msg = f"Command failed: {command}"
        if output:
            msg += f"\n{output.strip()}"
        super().__init__(msg)

    @property
    def last_successful(self) -> str | None:
        """The last command that completed before the failure, if any."""
        return self.executed[-1] if self.executed else None
