"""Branch name and release version validation.

Names arrive as a single string; whitespace inside a name means the user
typed more than one word on the command line, which is rejected.
"""

from __future__ import annotations

import re

from branchflow.exceptions import InvalidBranchNameError, InvalidVersionError

# Anything outside letters, digits, '-', '_', '.', '/' is rejected.
_INVALID_CHARS = re.compile(r"[^A-Za-z0-9\-_./]")

# Strict X.Y.Z: no leading zeros, no pre-release or build metadata.
_VERSION = re.compile(r"(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)")


def _has_whitespace(value: str) -> bool:
    return any(ch.isspace() for ch in value)


def validate_branch_name(name: str) -> str:
    """Validate a branch name and return it.

    Raises InvalidBranchNameError on violation.
    """
    if not name:
        raise InvalidBranchNameError(name, "branch name cannot be empty")

    if _has_whitespace(name):
        raise InvalidBranchNameError(name, "branch name cannot contain spaces")

    if _INVALID_CHARS.search(name):
        raise InvalidBranchNameError(
            name,
            "use only letters, numbers, hyphens, underscores, dots and slashes",
        )

    return name


def validate_version(version: str) -> str:
    """Validate a release version (``MAJOR.MINOR.PATCH``) and return it.

    Raises InvalidVersionError on violation.
    """
    if _has_whitespace(version):
        raise InvalidVersionError(version, "version cannot contain spaces")

    if not _VERSION.fullmatch(version):
        raise InvalidVersionError(version, "expected a MAJOR.MINOR.PATCH version number")

    return version


def is_valid_branch_name(name: str) -> bool:
    """Return True if *name* passes :func:`validate_branch_name`."""
    try:
        validate_branch_name(name)
    except InvalidBranchNameError:
        return False
    return True
