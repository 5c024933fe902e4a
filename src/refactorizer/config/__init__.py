"""Configuration management for refactorizer.

Layered YAML configuration:
- User-level config (~/.config/refactorizer/ or %APPDATA%)
- Project-level config (<project_root>/.refactorizer/)
- An explicit file passed with ``--config``
- Environment variable overrides (highest priority)

Example usage:
    from refactorizer.config import load_config

    config = load_config(project_root="/path/to/project")
    print(config.store.history_limit)
"""

from refactorizer.config.loader import (
    get_config,
    load_config,
    merge_layers,
    reset_config,
)
from refactorizer.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_user_config_path,
)
from refactorizer.config.schema import Config, LoggingConfig, StoreConfig

__all__ = [
    "Config",
    "LoggingConfig",
    "StoreConfig",
    "load_config",
    "get_config",
    "reset_config",
    "merge_layers",
    "get_config_paths",
    "get_user_config_path",
    "get_project_config_path",
]
