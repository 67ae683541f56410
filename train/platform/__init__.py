"""Platform helpers: subprocesses, files, user directories."""

from .files import atomic_write_text
from .paths import user_data_dir
from .process import ProcessError, run

__all__ = [
    "ProcessError",
    "atomic_write_text",
    "run",
    "user_data_dir",
]
