"""Init workflow for branchflow.

Builds a FlowConfig interactively (or from defaults with ``--yes``),
persists it, optionally creates the long-lived branches on the remote, and
commits the config file to the main branch.
"""

from __future__ import annotations

import json
import logging
import shlex
from typing import TYPE_CHECKING, Any

from branchflow.engine.queue import Plan
from branchflow.exceptions import BranchNotFoundError, InitCancelledError, InitDeclinedError
from branchflow.models.config import FlowConfig, merge_with_defaults
from branchflow.operations.queries import BranchQueryService
from branchflow.operations.validation import validate_branch_name
from branchflow.prompts import Question, ask_questions
from branchflow.reporting import EventKind, NullReporter, emit

if TYPE_CHECKING:
    from branchflow.config_store import ConfigStore
    from branchflow.engine.backend import GitBackend
    from branchflow.prompts import Prompter
    from branchflow.reporting import Reporter

logger = logging.getLogger(__name__)

CONFIG_COMMIT_MESSAGE = "Add gitflow configuration file"


def wizard_questions(base: dict[str, Any]) -> list[Question]:
    """The init questions, defaulting to the values in *base*."""
    return [
        Question(
            name="mainBranch",
            message="Enter the name of your main branch",
            default=base.get("mainBranch", "main"),
            validate=validate_branch_name,
        ),
        Question(
            name="developBranch",
            message="Enter the name of your develop branch",
            default=base.get("developBranch", "develop"),
            validate=validate_branch_name,
        ),
        Question(
            name="useStaging",
            message="Would you like to use a staging branch for testing?",
            kind="confirm",
            default=base.get("useStaging", False),
        ),
        Question(
            name="stagingBranch",
            message="Enter the name of your staging branch",
            default=base.get("stagingBranch") or "staging",
            validate=validate_branch_name,
            when=lambda answers: bool(answers.get("useStaging")),
        ),
        Question(
            name="pushBranches",
            message="Do you want to push the new branches to remote?",
            kind="confirm",
            default=base.get("pushBranches", True),
        ),
        Question(
            name="createBranches",
            message="Do you want to create the branches now?",
            kind="confirm",
            default=base.get("createBranches", False),
        ),
    ]


def run_init(
    store: ConfigStore,
    *,
    backend: GitBackend,
    prompter: Prompter | None,
    reporter: Reporter | None = None,
    use_defaults: bool = False,
) -> FlowConfig:
    """Create (or overwrite) the stored configuration.

    With *use_defaults* no question is asked: an existing config is kept
    as the starting point, otherwise the defaults are used, and no
    branches are created on the remote.

    Raises:
        InitCancelledError: The user refused to overwrite an existing config.
        InitDeclinedError: A question is needed but no prompter is available.
        ConfigurationError: The resulting config is invalid.
        BranchNotFoundError: The main branch is needed but does not exist.
        CommandExecutionError: A queued git command failed.
    """
    reporter = reporter or NullReporter()
    if prompter is None and not use_defaults:
        raise InitDeclinedError()

    emit(reporter, EventKind.BANNER, "Initializing branchflow")

    base: dict[str, Any] = merge_with_defaults(None)
    if store.exists():
        use_existing = True
        if not use_defaults:
            if not prompter.confirm(
                "branchflow is already initialized. "
                "Do you want to overwrite the existing configuration?",
                default=False,
            ):
                raise InitCancelledError()
            use_existing = prompter.confirm(
                "Start from the existing configuration? (no starts from the defaults)",
                default=True,
            )
        if use_existing:
            base = merge_with_defaults(store.read_raw())

    answers = {} if use_defaults else ask_questions(prompter, wizard_questions(base))
    config = FlowConfig.from_mapping({**base, **answers})

    if config.debug:
        emit(
            reporter,
            EventKind.WARNING,
            "Debug mode enabled, configuration file not saved",
            json.dumps(config.to_dict(), indent=2).splitlines(),
        )
    else:
        store.persist(config)

    create_remote = False
    if not use_defaults:
        create_remote = prompter.confirm(
            "Do you want to create the branches on remote?",
            default=config.create_branches,
        )

    queries = BranchQueryService(backend)
    plan = Plan()
    main = config.main_branch

    if not config.debug and _config_file_changed(queries, store):
        _ensure_on(plan, queries, main, reporter)
        emit(reporter, EventKind.STEP, "Committing configuration file")
        plan.queue.enqueue(f"git add {shlex.quote(str(store.path))}")
        plan.queue.enqueue(f'git commit -m "{CONFIG_COMMIT_MESSAGE}"')
        if config.push_branches:
            plan.queue.enqueue(f"git push {queries.remote} {main}")

    if create_remote:
        _ensure_on(plan, queries, main, reporter)
        _create_long_lived(plan, queries, config.develop_branch, main, reporter)
        if config.use_staging and config.staging_branch:
            _create_long_lived(
                plan, queries, config.staging_branch, config.develop_branch, reporter
            )

    plan.queue.flush(backend, dry_run=config.debug, reporter=reporter)

    summary = [f"Main: {config.main_branch}", f"Develop: {config.develop_branch}"]
    if config.use_staging:
        summary.append(f"Staging: {config.staging_branch}")
    emit(reporter, EventKind.SUCCESS, "branchflow has been initialized with branches:", summary)
    if config.create_branches:
        emit(reporter, EventKind.INFO, "All branches are ready!")
    emit(reporter, EventKind.INFO, f"Configuration file: {store.path}")
    return config


def _config_file_changed(queries: BranchQueryService, store: ConfigStore) -> bool:
    name = store.path.name
    return any(
        path == name or path.endswith("/" + name) for path in queries.changed_paths()
    )


def _ensure_on(
    plan: Plan, queries: BranchQueryService, branch: str, reporter: Reporter
) -> None:
    current = plan.head if plan.head is not None else queries.current_branch()
    if current == branch:
        plan.head = branch
        return
    if not queries.exists_local(branch):
        raise BranchNotFoundError(branch)
    emit(reporter, EventKind.STEP, f"Checkout to '{branch}'")
    plan.queue.enqueue(f"git checkout {branch}")
    plan.head = branch


def _create_long_lived(
    plan: Plan,
    queries: BranchQueryService,
    branch: str,
    source: str,
    reporter: Reporter,
) -> None:
    """Create *branch* from *source* when missing, and push it with upstream."""
    if queries.exists_local(branch):
        emit(reporter, EventKind.INFO, f"Branch '{branch}' already exists")
    else:
        emit(reporter, EventKind.STEP, f"Create '{branch}' from '{source}'")
        plan.queue.enqueue(f"git branch {branch} {source}")

    if queries.exists_remote(branch):
        logger.info("%s already exists on %s", branch, queries.remote)
        return
    emit(reporter, EventKind.STEP, f"Push '{branch}' to remote")
    plan.queue.enqueue(f"git push -u {queries.remote} {branch}")
