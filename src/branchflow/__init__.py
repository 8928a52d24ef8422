"""branchflow: feature/release/bugfix/hotfix branch workflows on top of git.

Sequences and validates calls to the git binary; it does not merge or talk
to the remote host itself.
"""

from branchflow._version import __version__

# Core entry point
from branchflow.flow import BranchFlow

# Configuration
from branchflow.config_store import CONFIG_FILE_NAME, ConfigStore
from branchflow.models.config import DEFAULT_CONFIG, BranchPrefixes, FlowConfig

# Branch kinds
from branchflow.models.branch import BranchKind, BranchRole, KindDescriptor, get_descriptor

# Results
from branchflow.models.result import AheadBehind, CommandResult, ExecutionResult, LifecycleResult

# Building blocks
from branchflow.engine.backend import GitBackend, SubprocessGitBackend
from branchflow.engine.queue import CommandQueue
from branchflow.operations.conflicts import ConflictDetector
from branchflow.operations.queries import BranchQueryService
from branchflow.operations.validation import validate_branch_name, validate_version
from branchflow.prompts import ClickPrompter, Prompter, Question, ask_questions
from branchflow.reporting import EventKind, FlowEvent, NullReporter, Reporter

# Exceptions
from branchflow.exceptions import (
    BranchExistsError,
    BranchflowError,
    BranchNotFoundError,
    CommandExecutionError,
    ConfigurationError,
    DirtyWorkingTreeError,
    InitCancelledError,
    InitDeclinedError,
    InputValidationError,
    InvalidBranchNameError,
    InvalidVersionError,
    MergeConflictError,
    NoCommitsError,
    StateError,
)

__all__ = [
    "__version__",
    "BranchFlow",
    "CONFIG_FILE_NAME",
    "ConfigStore",
    "DEFAULT_CONFIG",
    "BranchPrefixes",
    "FlowConfig",
    "BranchKind",
    "BranchRole",
    "KindDescriptor",
    "get_descriptor",
    "AheadBehind",
    "CommandResult",
    "ExecutionResult",
    "LifecycleResult",
    "GitBackend",
    "SubprocessGitBackend",
    "CommandQueue",
    "ConflictDetector",
    "BranchQueryService",
    "validate_branch_name",
    "validate_version",
    "ClickPrompter",
    "Prompter",
    "Question",
    "ask_questions",
    "EventKind",
    "FlowEvent",
    "NullReporter",
    "Reporter",
    "BranchExistsError",
    "BranchflowError",
    "BranchNotFoundError",
    "CommandExecutionError",
    "ConfigurationError",
    "DirtyWorkingTreeError",
    "InitCancelledError",
    "InitDeclinedError",
    "InputValidationError",
    "InvalidBranchNameError",
    "InvalidVersionError",
    "MergeConflictError",
    "NoCommitsError",
    "StateError",
]
