"""Shared test fixtures for branchflow.

Provides an in-memory fake git backend, a scripted prompter, a recording
reporter and helpers to build configs and controllers against them.
No test touches a real repository.
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from branchflow.flow import BranchFlow
from branchflow.models.config import FlowConfig
from branchflow.models.result import CommandResult
from branchflow.reporting import EventKind, FlowEvent

# argv heads that only read repository state
_QUERY_VERBS = {"rev-parse", "ls-remote", "rev-list", "status", "diff"}


class FakeGit:
    """Scripted git backend.

    Keeps a tiny model of the repository (branch -> commit id, remote
    branches, current branch, working tree status, unmerged paths) and
    records every argv it receives in ``calls``.
    """

    def __init__(
        self,
        *,
        branches: dict[str, str] | None = None,
        current: str = "develop",
        remote: Sequence[str] = (),
        status: Sequence[str] = (),
        unmerged: Sequence[str] = (),
        conflict_on_merge: Sequence[str] = (),
    ) -> None:
        self.branches = dict(branches if branches is not None else {"main": "c0", "develop": "c1"})
        self.remote = set(remote)
        self.current = current
        self.status = list(status)
        self.unmerged = list(unmerged)
        self.conflict_on_merge = list(conflict_on_merge)
        self.tags: list[str] = []
        self.calls: list[tuple[str, ...]] = []
        self._failures: list[tuple[str, CommandResult]] = []
        self._commit_seq = 0

    # -- scripting ---------------------------------------------------------

    def fail(self, prefix: str, *, stderr: str = "", stdout: str = "", exit_code: int = 1) -> None:
        """Make any invocation whose joined argv starts with *prefix* fail."""
        self._failures.append((prefix, CommandResult(exit_code, stdout, stderr)))

    # -- inspection --------------------------------------------------------

    @staticmethod
    def is_query(argv: tuple[str, ...]) -> bool:
        return argv[0] in _QUERY_VERBS or argv[:2] == ("branch", "--show-current")

    def mutations(self) -> list[str]:
        """Joined argv of every non-query call, in order."""
        return [" ".join(argv) for argv in self.calls if not self.is_query(argv)]

    def index_of(self, head: str) -> int:
        """Position in ``calls`` of the first argv starting with *head*."""
        for i, argv in enumerate(self.calls):
            if " ".join(argv).startswith(head):
                return i
        raise AssertionError(f"no call starting with {head!r}")

    # -- GitBackend --------------------------------------------------------

    def run(self, argv: Sequence[str]) -> CommandResult:
        argv = tuple(argv)
        self.calls.append(argv)
        joined = " ".join(argv)
        for prefix, result in self._failures:
            if joined.startswith(prefix):
                return result
        return self._dispatch(argv)

    def _new_commit(self) -> str:
        self._commit_seq += 1
        return f"m{self._commit_seq}"

    def _dispatch(self, argv: tuple[str, ...]) -> CommandResult:
        ok = CommandResult(0)
        match argv:
            case ("branch", "--show-current"):
                return CommandResult(0, self.current + "\n")
            case ("rev-parse", "--verify", "--quiet", ref):
                name = ref.removeprefix("refs/heads/")
                return ok if name in self.branches else CommandResult(1)
            case ("rev-parse", ref):
                if ref not in self.branches:
                    return CommandResult(128, ref + "\n", f"fatal: ambiguous argument '{ref}'\n")
                return CommandResult(0, self.branches[ref] + "\n")
            case ("ls-remote", "--heads", _remote, name):
                if name in self.remote:
                    return CommandResult(0, f"abc123\trefs/heads/{name}\n")
                return CommandResult(0, "")
            case ("rev-list", "--left-right", "--count", spec):
                left, right = spec.split("...")
                ahead = int(self.branches.get(left) != self.branches.get(right))
                return CommandResult(0, f"{ahead}\t0\n")
            case ("status", "--porcelain"):
                return CommandResult(0, "".join(line + "\n" for line in self.status))
            case ("diff", "--name-only", "--diff-filter=U"):
                return CommandResult(0, "".join(p + "\n" for p in self.unmerged))
            case ("checkout", "-b", new, base):
                self.branches[new] = self.branches[base]
                self.current = new
                return ok
            case ("checkout", name):
                if name not in self.branches:
                    return CommandResult(1, "", f"error: pathspec '{name}' did not match\n")
                self.current = name
                return ok
            case ("pull", *_):
                return ok
            case ("merge", "--no-ff", "--no-edit", source):
                if source in self.conflict_on_merge:
                    self.unmerged.append("conflicted.txt")
                    return CommandResult(
                        1, "CONFLICT (content): Merge conflict in conflicted.txt\n", ""
                    )
                self.branches[self.current] = self._new_commit()
                return ok
            case ("push", _remote, "--delete", name):
                self.remote.discard(name)
                return ok
            case ("push", "-u", _remote, name) | ("push", _remote, name):
                self.remote.add(name)
                return ok
            case ("branch", "-d", name):
                self.branches.pop(name, None)
                return ok
            case ("branch", new, source):
                self.branches[new] = self.branches[source]
                return ok
            case ("tag", "-a", name, "-m", _message):
                self.tags.append(name)
                return ok
            case ("add", *_):
                return ok
            case ("commit", "-m", _message):
                self.status.clear()
                self.branches[self.current] = self._new_commit()
                return ok
        return CommandResult(1, "", f"fake git: unsupported command {' '.join(argv)}\n")


class ScriptedPrompter:
    """Prompter that replays canned answers and records the questions."""

    def __init__(self, confirms: Sequence[bool] = (), texts: Sequence[str] = ()) -> None:
        self._confirms = list(confirms)
        self._texts = list(texts)
        self.asked: list[str] = []

    def confirm(self, message: str, default: bool = False) -> bool:
        self.asked.append(message)
        if not self._confirms:
            return default
        return self._confirms.pop(0)

    def ask(self, message, default=None, validate=None) -> str:
        self.asked.append(message)
        answer = self._texts.pop(0) if self._texts else default
        if validate is not None:
            validate(answer)
        return answer


class RecordingReporter:
    def __init__(self) -> None:
        self.events: list[FlowEvent] = []

    def report(self, event: FlowEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> list[FlowEvent]:
        return [e for e in self.events if e.kind is kind]


# ------------------------------------------------------------------
# Shared test helpers
# ------------------------------------------------------------------

def make_config(**overrides) -> FlowConfig:
    """Default config with camelCase *overrides* merged in."""
    return FlowConfig.from_mapping(overrides)


def make_flow(fake: FakeGit, reporter: RecordingReporter | None = None, **overrides) -> BranchFlow:
    return BranchFlow(make_config(**overrides), backend=fake, reporter=reporter)


@pytest.fixture
def fake() -> FakeGit:
    """Repository on develop with main and develop, both on the remote."""
    return FakeGit(remote=("main", "develop"))


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
