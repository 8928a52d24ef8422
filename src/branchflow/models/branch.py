"""Branch kind domain model for branchflow.

Each BranchKind maps to a KindDescriptor describing which long-lived branch
it is created from and the ordered list of branches it merges into on
finish. The merge-target order is a contract: workflows must never reorder it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class BranchKind(str, enum.Enum):
    """The four short-lived branch kinds."""

    FEATURE = "feature"
    RELEASE = "release"
    BUGFIX = "bugfix"
    HOTFIX = "hotfix"

    def __str__(self) -> str:
        return self.value


class BranchRole(str, enum.Enum):
    """Long-lived branches, resolved to concrete names through the config."""

    MAIN = "main"
    DEVELOP = "develop"
    STAGING = "staging"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class KindDescriptor:
    """Per-kind workflow parameters.

    ``merge_targets`` lists STAGING even though it only applies when the
    config enables it; the controller filters it out otherwise.
    """

    kind: BranchKind
    based_on: BranchRole
    merge_targets: tuple[BranchRole, ...]
    tag_on_main: bool = False
    versioned: bool = False


DESCRIPTORS: dict[BranchKind, KindDescriptor] = {
    BranchKind.FEATURE: KindDescriptor(
        kind=BranchKind.FEATURE,
        based_on=BranchRole.DEVELOP,
        merge_targets=(BranchRole.DEVELOP, BranchRole.STAGING),
    ),
    BranchKind.BUGFIX: KindDescriptor(
        kind=BranchKind.BUGFIX,
        based_on=BranchRole.DEVELOP,
        merge_targets=(BranchRole.DEVELOP, BranchRole.STAGING),
    ),
    BranchKind.RELEASE: KindDescriptor(
        kind=BranchKind.RELEASE,
        based_on=BranchRole.DEVELOP,
        merge_targets=(BranchRole.MAIN, BranchRole.DEVELOP, BranchRole.STAGING),
        tag_on_main=True,
        versioned=True,
    ),
    BranchKind.HOTFIX: KindDescriptor(
        kind=BranchKind.HOTFIX,
        based_on=BranchRole.MAIN,
        merge_targets=(BranchRole.MAIN, BranchRole.DEVELOP, BranchRole.STAGING),
    ),
}


def get_descriptor(kind: BranchKind | str) -> KindDescriptor:
    """Return the descriptor for *kind* (enum member or its string value)."""
    return DESCRIPTORS[BranchKind(kind)]
