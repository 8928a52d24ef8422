"""Plain-text progress reporting for branchflow workflows.

Workflows describe what they are doing by emitting FlowEvents to a Reporter.
Rendering (colors, bordered banners) belongs to the CLI; library callers
get a NullReporter unless they pass their own.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class EventKind(str, enum.Enum):
    BANNER = "banner"
    STEP = "step"
    INFO = "info"
    WARNING = "warning"
    COMMANDS = "commands"
    CONFLICT = "conflict"
    SUCCESS = "success"


@dataclass(frozen=True)
class FlowEvent:
    """A single progress event.

    ``detail`` carries list-shaped payloads: the queued commands for
    COMMANDS events, the unmerged paths for CONFLICT events.
    """

    kind: EventKind
    message: str
    detail: tuple[str, ...] = ()


@runtime_checkable
class Reporter(Protocol):
    def report(self, event: FlowEvent) -> None: ...


class NullReporter:
    """Reporter that discards every event."""

    def report(self, event: FlowEvent) -> None:
        return None


def emit(
    reporter: Reporter, kind: EventKind, message: str, detail: tuple[str, ...] | list[str] = ()
) -> None:
    reporter.report(FlowEvent(kind=kind, message=message, detail=tuple(detail)))
