"""User-level directories.

Pending releases live outside the working copy so that saving one never
dirties the tree the next ``cut`` checks.
"""

from __future__ import annotations

import os
from pathlib import Path

__all__ = ["APP_NAME", "user_data_dir"]

APP_NAME = "train"


def user_data_dir() -> Path:
    """Get the per-user data directory.

    Location: $XDG_DATA_HOME/train or ~/.local/share/train (Linux/macOS),
    %LOCALAPPDATA%/train (Windows).
    """
    if os.name == "nt":
        local = os.environ.get("LOCALAPPDATA")
        if local:
            return Path(local) / APP_NAME
        return Path.home() / "AppData" / "Local" / APP_NAME

    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME
