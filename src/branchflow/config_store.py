"""Persisted configuration store for branchflow.

The config lives in ``.gitflow-config.json`` in the invocation directory.
Loading merges the file over the defaults and validates the result;
persisting writes the canonical camelCase JSON back.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from branchflow.exceptions import ConfigurationError, InitDeclinedError
from branchflow.models.config import FlowConfig

if TYPE_CHECKING:
    from branchflow.prompts import Prompter

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gitflow-config.json"


class ConfigStore:
    """Reads and writes a FlowConfig at a fixed path."""

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else Path.cwd() / CONFIG_FILE_NAME

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read_raw(self) -> dict[str, Any]:
        """Parse the stored JSON object without merging or validating."""
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ConfigurationError(
                f"Invalid configuration file {self._path}: {exc}. "
                f"Please delete it and re-run 'branchflow init'."
            ) from None
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration file {self._path}: expected a JSON object. "
                f"Please delete it and re-run 'branchflow init'."
            )
        return data

    def load(
        self,
        prompter: Prompter | None = None,
        *,
        initializer: Callable[[], object] | None = None,
    ) -> FlowConfig:
        """Load, merge over defaults and validate the stored config.

        When no config exists the user is asked whether to run init; the
        *initializer* is called on yes, after which loading proceeds.

        Raises:
            InitDeclinedError: No config exists and the user declined init.
            ConfigurationError: The stored config is unreadable or invalid.
        """
        if not self.exists():
            if prompter is None or initializer is None:
                raise InitDeclinedError()
            if not prompter.confirm(
                "No branchflow configuration found. Do you want to run 'branchflow init'?",
                default=False,
            ):
                raise InitDeclinedError()
            initializer()
            if not self.exists():
                raise InitDeclinedError()

        config = FlowConfig.from_mapping(self.read_raw())
        logger.debug("Loaded configuration from %s", self._path)
        return config

    @staticmethod
    def validate(config: FlowConfig | dict[str, Any]) -> bool:
        """Validate a config (already merged) and return True.

        Raises:
            ConfigurationError: On the first invalid field.
        """
        if isinstance(config, FlowConfig):
            config = config.to_dict()
        FlowConfig.from_mapping(config)
        return True

    def persist(self, config: FlowConfig) -> Path:
        """Write *config* as indented camelCase JSON."""
        text = json.dumps(config.to_dict(), indent=2) + "\n"
        self._path.write_text(text, encoding="utf-8")
        logger.info("Saved configuration to %s", self._path)
        return self._path
