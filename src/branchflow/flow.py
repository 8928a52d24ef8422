"""BranchFlow -- the branch lifecycle controller.

Composes validation, repository queries, conflict detection and the
command queue into start/finish workflows for feature, release, bugfix and
hotfix branches. Every workflow is driven by the per-kind descriptor in
:mod:`branchflow.models.branch`.

The controller keeps no state between operations: each call re-reads the
repository and builds its own command queue. Running two branchflow
processes against the same working directory at once is not supported.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from branchflow.config_store import ConfigStore
from branchflow.engine.backend import GitBackend, SubprocessGitBackend
from branchflow.engine.queue import Plan
from branchflow.exceptions import (
    BranchExistsError,
    BranchNotFoundError,
    DirtyWorkingTreeError,
    MergeConflictError,
    NoCommitsError,
)
from branchflow.models.branch import BranchKind, BranchRole, KindDescriptor, get_descriptor
from branchflow.models.config import FlowConfig
from branchflow.models.result import ExecutionResult, LifecycleResult
from branchflow.operations.conflicts import ConflictDetector
from branchflow.operations.queries import BranchQueryService
from branchflow.operations.validation import validate_branch_name, validate_version
from branchflow.reporting import EventKind, NullReporter, Reporter, emit

if TYPE_CHECKING:
    from pathlib import Path

    from branchflow.prompts import Prompter

logger = logging.getLogger(__name__)


class BranchFlow:
    """Start and finish short-lived branches on top of git.

    Create one via :meth:`BranchFlow.open` (loads the config file and
    talks to the real git binary) or construct it directly with a config
    and backend (testing / DI).

    Example::

        flow = BranchFlow.open()
        flow.start(BranchKind.FEATURE, "login")
        ...
        flow.finish(BranchKind.FEATURE, "login")
    """

    def __init__(
        self,
        config: FlowConfig,
        *,
        backend: GitBackend,
        reporter: Reporter | None = None,
    ) -> None:
        self._config = config
        self._backend = backend
        self._reporter = reporter or NullReporter()
        self._queries = BranchQueryService(backend)
        self._conflicts = ConflictDetector(backend, self._reporter)

    @classmethod
    def open(
        cls,
        *,
        config_path: str | Path | None = None,
        cwd: str | None = None,
        prompter: Prompter | None = None,
        reporter: Reporter | None = None,
        backend: GitBackend | None = None,
    ) -> BranchFlow:
        """Load the stored config and bind a controller to it.

        If no config exists and a *prompter* is given, the user is offered
        the init workflow first.
        """
        from branchflow.operations.init import run_init

        backend = backend or SubprocessGitBackend(cwd)
        store = ConfigStore(config_path)

        def _initializer() -> FlowConfig:
            return run_init(store, backend=backend, prompter=prompter, reporter=reporter)

        config = store.load(prompter, initializer=_initializer)
        return cls(config, backend=backend, reporter=reporter)

    @property
    def config(self) -> FlowConfig:
        return self._config

    @property
    def queries(self) -> BranchQueryService:
        return self._queries

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def start(self, kind: BranchKind | str, name: str) -> LifecycleResult:
        """Create ``<prefix><name>`` from the kind's base branch and check it out.

        Nothing is pushed; the branch reaches the remote only on finish.

        Raises:
            InputValidationError: Invalid name or version.
            BranchExistsError: The branch already exists locally.
            BranchNotFoundError: The base branch does not exist locally.
            DirtyWorkingTreeError: A checkout is needed and the tree is dirty.
            CommandExecutionError: A queued git command failed.
        """
        descriptor = get_descriptor(kind)
        short_name = self._validate_name(descriptor, name)
        branch = self._config.full_name(descriptor.kind, short_name)

        if self._queries.exists_local(branch):
            raise BranchExistsError(branch)

        base = self._config.branch_for(descriptor.based_on)

        emit(self._reporter, EventKind.BANNER, f"Start new {descriptor.kind}")
        plan = Plan()
        self._checkout(plan, base)
        emit(
            self._reporter,
            EventKind.STEP,
            f"A new branch '{branch}' was created, based on '{base}'",
        )
        plan.queue.enqueue(f"git checkout -b {branch} {base}")
        plan.head = branch

        execution = self._flush(plan)

        emit(self._reporter, EventKind.INFO, f"You are now on branch '{branch}'")
        emit(
            self._reporter,
            EventKind.INFO,
            f"Start committing on your {descriptor.kind}. When done, use: "
            f"branchflow {descriptor.kind}:finish {short_name}",
        )
        return LifecycleResult(
            kind=descriptor.kind, branch=branch, base=base, execution=execution
        )

    def finish(self, kind: BranchKind | str, name: str) -> LifecycleResult:
        """Merge the branch into its targets, in order, then delete it.

        After each merge is queued the working tree is checked for
        unmerged paths. That check runs before the queue is flushed, so it
        sees the repository as it was before the queued merge.

        Raises:
            InputValidationError: Invalid name or version.
            BranchNotFoundError: The branch or a merge target does not exist.
            NoCommitsError: The branch points at the same commit as its base.
            DirtyWorkingTreeError: A checkout is needed and the tree is dirty.
            MergeConflictError: Unmerged paths were found after a merge step.
            CommandExecutionError: A queued git command failed.
        """
        descriptor = get_descriptor(kind)
        short_name = self._validate_name(descriptor, name)
        branch = self._config.full_name(descriptor.kind, short_name)

        if not self._queries.exists_local(branch):
            raise BranchNotFoundError(branch)

        base = self._config.branch_for(descriptor.based_on)
        if self._queries.hashes_equal(branch, base):
            raise NoCommitsError(branch)

        targets = self._merge_targets(descriptor)

        emit(self._reporter, EventKind.BANNER, f"Finishing {branch}")
        counts = self._queries.ahead_behind(branch, base)
        emit(
            self._reporter,
            EventKind.INFO,
            f"'{branch}' is {counts.ahead} commit(s) ahead of '{base}'",
        )

        plan = Plan()
        tag: str | None = None
        for role, target in targets:
            self._checkout(plan, target)
            self._merge(plan, branch, target)
            if role is BranchRole.MAIN and descriptor.tag_on_main:
                tag = f"v{short_name}"
                emit(self._reporter, EventKind.STEP, f"Add tag {tag}")
                plan.queue.enqueue(f'git tag -a {tag} -m "{tag}"')
        self._delete(plan, branch)

        execution = self._flush(plan)

        if not self._config.push_branches:
            emit(
                self._reporter,
                EventKind.WARNING,
                "Branches are not pushed to remote. Run `git push origin <branch>` to push",
            )
        elif descriptor.kind is BranchKind.RELEASE:
            emit(self._reporter, EventKind.SUCCESS, f"Congratulations on release {tag}")

        return LifecycleResult(
            kind=descriptor.kind,
            branch=branch,
            base=base,
            merge_targets=[target for _, target in targets],
            tag=tag,
            execution=execution,
        )

    def switch(self, name: str) -> ExecutionResult:
        """Check out an existing local branch and pull it.

        Raises:
            InputValidationError: Invalid branch name.
            BranchNotFoundError: The branch does not exist locally.
            DirtyWorkingTreeError: The working tree has uncommitted changes.
        """
        branch = validate_branch_name(name)
        plan = Plan()
        if self._queries.current_branch() == branch:
            emit(self._reporter, EventKind.INFO, f"Already on '{branch}'")
            return ExecutionResult()
        self._checkout(plan, branch)
        return self._flush(plan)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _validate_name(self, descriptor: KindDescriptor, name: str) -> str:
        if descriptor.versioned:
            return validate_version(name)
        return validate_branch_name(name)

    def _merge_targets(self, descriptor: KindDescriptor) -> list[tuple[BranchRole, str]]:
        return [
            (role, self._config.branch_for(role))
            for role in descriptor.merge_targets
            if role is not BranchRole.STAGING or self._config.use_staging
        ]

    def _checkout(self, plan: Plan, branch: str) -> None:
        """Queue a checkout of *branch* (plus a pull when it is on the remote).

        Skipped when *branch* is what the plan will already have checked out.
        """
        current = plan.head if plan.head is not None else self._queries.current_branch()
        if current == branch:
            logger.info("Already on %s, checkout skipped", branch)
            plan.head = branch
            return

        if not self._queries.exists_local(branch):
            raise BranchNotFoundError(branch)
        if not self._queries.working_tree_clean():
            raise DirtyWorkingTreeError()

        emit(self._reporter, EventKind.STEP, f"Checkout to '{branch}'")
        plan.queue.enqueue(f"git checkout {branch}")
        if self._queries.exists_remote(branch):
            plan.queue.enqueue(f"git pull {self._queries.remote} {branch}")
        plan.head = branch

    def _merge(self, plan: Plan, source: str, target: str) -> None:
        emit(self._reporter, EventKind.STEP, f"Merge '{source}' into '{target}'")
        plan.queue.enqueue(f"git merge --no-ff --no-edit {source}")

        # Point-in-time check of the working tree; the merge above is
        # still only queued.
        paths = self._conflicts.detect()
        if paths:
            raise MergeConflictError(source, target, paths)

        if self._config.push_branches:
            emit(self._reporter, EventKind.STEP, f"Push '{target}' to remote")
            plan.queue.enqueue(f"git push {self._queries.remote} {target}")

    def _delete(self, plan: Plan, branch: str) -> None:
        emit(self._reporter, EventKind.STEP, f"Delete local '{branch}' branch")
        plan.queue.enqueue(f"git branch -d {branch}")
        if self._config.push_branches and self._queries.exists_remote(branch):
            emit(self._reporter, EventKind.STEP, f"Delete remote '{branch}' branch")
            plan.queue.enqueue(f"git push {self._queries.remote} --delete {branch}")

    def _flush(self, plan: Plan) -> ExecutionResult:
        return plan.queue.flush(
            self._backend, dry_run=self._config.debug, reporter=self._reporter
        )
