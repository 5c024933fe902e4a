"""Configuration schema dataclasses for refactorizer.

All fields are optional so partial configs from several layers can merge.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, takes precedence over level
    file: str | None = None  # Log file path


@dataclass
class StoreConfig:
    """Dispatch store configuration.

    Example config.yaml:
        store:
          history_limit: 50
          log_transitions: false
    """

    history_limit: int = 100  # Transitions kept in RefactorStore.history; 0 disables
    log_transitions: bool = True  # Log every applied action at VERBOSE


@dataclass
class Config:
    """Root configuration object."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    store: StoreConfig = field(default_factory=StoreConfig)

    # Unknown top-level sections are preserved here
    extra: dict[str, Any] = field(default_factory=dict)
