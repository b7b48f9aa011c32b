"""
Utilities for handling file paths and application directories.
"""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Returns the per-user configuration directory for tvdb-sync."""
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "tvdb-sync"


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)
