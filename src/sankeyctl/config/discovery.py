"""Config file discovery.

Walk-up finder locates sankeyctl.toml, similar to how git finds .git/.
Supports SANKEYCTL_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "sankeyctl.toml"
CONFIG_ENV_VAR = "SANKEYCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for sankeyctl.toml.

    Returns the path to the config file, or None if not found.
    Checks SANKEYCTL_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent
