"""Platform-aware configuration path resolution.

- Windows: %APPDATA%\\refactorizer\\config.yaml
- Unix: $XDG_CONFIG_HOME/refactorizer/, ~/.config/refactorizer/ or ~/.refactorizer/
- Project: <project_root>/.refactorizer/config.yaml
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "refactorizer"
PROJECT_DIR = ".refactorizer"


def get_user_config_path() -> Path | None:
    """Get the user-level config path (the file may not exist)."""
    if sys.platform == "win32":
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME / CONFIG_FILENAME
        return None

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME / CONFIG_FILENAME

    home = Path.home()
    if (home / ".config").exists():
        return home / ".config" / APP_NAME / CONFIG_FILENAME
    return home / PROJECT_DIR / CONFIG_FILENAME


def get_project_config_path(project_root: str | Path) -> Path:
    """Get the project-level config path (the file may not exist)."""
    return Path(project_root) / PROJECT_DIR / CONFIG_FILENAME


def get_config_paths(
    project_root: str | Path | None = None,
    config_file: str | Path | None = None,
) -> list[Path]:
    """Get all config paths in priority order (lowest to highest).

    Args:
        project_root: Optional project directory for project-level config.
        config_file: Optional explicit file, e.g. from ``--config``.
    """
    paths: list[Path] = []

    user_path = get_user_config_path()
    if user_path:
        paths.append(user_path)

    if project_root:
        paths.append(get_project_config_path(project_root))

    if config_file:
        paths.append(Path(config_file))

    return paths
