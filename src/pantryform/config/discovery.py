"""Config file discovery.

Walk-up finder locates pantryform.toml from the working directory, so the
CLI can run from any folder inside a pantry workspace. The
PANTRYFORM_CONFIG env var and the --config CLI flag take precedence.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "pantryform.toml"
CONFIG_ENV_VAR = "PANTRYFORM_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for pantryform.toml.

    Returns the path to the config file, or None if not found.
    A set PANTRYFORM_CONFIG wins over the walk-up, even when it points at
    a missing file (then None is returned).
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config_path(config_path: str | None, start: Path | None = None) -> Path | None:
    """Return the explicit *config_path* when it exists, else discover one."""
    if config_path:
        p = Path(config_path)
        return p if p.is_file() else None
    return find_config(start)
