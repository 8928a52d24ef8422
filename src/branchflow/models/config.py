"""Configuration models for branchflow.

FlowConfig is the process-wide workflow configuration. It is stored on disk
as camelCase JSON (``mainBranch``, ``useStaging``, ...) and exposed to Python
with snake_case attributes. Instances are frozen: lifecycle operations never
mutate the config; the init workflow builds a new one instead.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    field_validator,
    model_validator,
)

from branchflow.exceptions import ConfigurationError, InvalidBranchNameError
from branchflow.models.branch import BranchKind, BranchRole
from branchflow.operations.validation import validate_branch_name

DEFAULT_CONFIG: dict[str, Any] = {
    "mainBranch": "main",
    "developBranch": "develop",
    "useStaging": False,
    "pushBranches": True,
    "createBranches": False,
    "debug": False,
    "prefixes": {
        "feature": "feature/",
        "release": "release/",
        "bugfix": "bugfix/",
        "hotfix": "hotfix/",
    },
}

_REQUIRED_FIELDS = ("mainBranch", "developBranch", "prefixes")

# snake_case attribute -> camelCase JSON key
_ALIASES: dict[str, str] = {
    "main_branch": "mainBranch",
    "develop_branch": "developBranch",
    "use_staging": "useStaging",
    "staging_branch": "stagingBranch",
    "push_branches": "pushBranches",
    "create_branches": "createBranches",
}
_ATTRS = {alias: attr for attr, alias in _ALIASES.items()}


def _check_name(value: str) -> str:
    try:
        return validate_branch_name(value)
    except InvalidBranchNameError as exc:
        # pydantic only collects ValueError/AssertionError
        raise ValueError(str(exc)) from None


class BranchPrefixes(BaseModel):
    """Prefix per branch kind; all four are required."""

    model_config = ConfigDict(frozen=True)

    feature: str
    release: str
    bugfix: str
    hotfix: str

    @field_validator("feature", "release", "bugfix", "hotfix")
    @classmethod
    def _valid_prefix(cls, value: str) -> str:
        return _check_name(value)

    def for_kind(self, kind: BranchKind | str) -> str:
        return getattr(self, BranchKind(kind).value)


class FlowConfig(BaseModel):
    """Workflow configuration loaded from ``.gitflow-config.json``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    main_branch: str = Field(alias="mainBranch")
    develop_branch: str = Field(alias="developBranch")
    use_staging: StrictBool = Field(default=False, alias="useStaging")
    staging_branch: Optional[str] = Field(default=None, alias="stagingBranch")
    push_branches: StrictBool = Field(default=True, alias="pushBranches")
    create_branches: StrictBool = Field(default=False, alias="createBranches")
    debug: StrictBool = False
    prefixes: BranchPrefixes

    @model_validator(mode="before")
    @classmethod
    def _required_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        for name in _REQUIRED_FIELDS:
            if not (data.get(name) or data.get(_ATTRS.get(name, name))):
                raise ValueError(f"Missing required configuration field: {name}")
        prefixes = data.get("prefixes")
        if isinstance(prefixes, Mapping):
            for kind in BranchKind:
                if not prefixes.get(kind.value):
                    raise ValueError(f"Missing required prefix: {kind.value}")
        return data

    @field_validator("main_branch", "develop_branch")
    @classmethod
    def _valid_branch(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("staging_branch")
    @classmethod
    def _valid_staging(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _check_name(value)

    @model_validator(mode="after")
    def _staging_required(self) -> FlowConfig:
        if self.use_staging and not self.staging_branch:
            raise ValueError("stagingBranch is required when useStaging is enabled")
        return self

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None = None) -> FlowConfig:
        """Merge *data* over :data:`DEFAULT_CONFIG` and validate.

        The merge is shallow: a ``prefixes`` object in *data* replaces the
        default one wholesale.

        Raises:
            ConfigurationError: If the merged config is invalid.
        """
        merged = merge_with_defaults(data)
        try:
            return cls.model_validate(merged)
        except ValidationError as exc:
            raise ConfigurationError(_describe(exc)) from None

    @classmethod
    def default(cls) -> FlowConfig:
        return cls.from_mapping()

    def to_dict(self) -> dict[str, Any]:
        """Canonical camelCase representation, as persisted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def branch_for(self, role: BranchRole) -> str:
        """Resolve a long-lived branch role to its configured name."""
        if role is BranchRole.MAIN:
            return self.main_branch
        if role is BranchRole.DEVELOP:
            return self.develop_branch
        if not self.use_staging or not self.staging_branch:
            raise ConfigurationError("Staging branch is not enabled in the configuration")
        return self.staging_branch

    def full_name(self, kind: BranchKind | str, short_name: str) -> str:
        """Prefix *short_name* with the configured prefix for *kind*."""
        return f"{self.prefixes.for_kind(kind)}{short_name}"


def merge_with_defaults(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Shallow-merge *data* over a copy of the defaults (data wins)."""
    merged = copy.deepcopy(DEFAULT_CONFIG)
    if data:
        merged.update(data)
    return merged


def _describe(exc: ValidationError) -> str:
    """Turn the first pydantic error into a one-line message."""
    err = exc.errors()[0]
    msg = err.get("msg", "invalid value")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    loc = ".".join(
        _ALIASES.get(str(part), str(part)) for part in err.get("loc", ())
    )
    if err.get("type") == "bool_type":
        return f"Invalid value for '{loc}'. Must be a boolean."
    if loc:
        return f"Invalid configuration field '{loc}': {msg}"
    return msg
