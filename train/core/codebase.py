"""Codebase validation and package discovery.

A codebase is the git working copy the tool is invoked from. It holds a
packages root with one directory per releasable package.

Usage:
    from train.core.codebase import check_codebase, list_packages

    match check_codebase(root, config):
        case Ok(_):
            packages = list_packages(root, config)
        case Err(error):
            print(error.message)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from train.core.config import Config
from train.core.result import Err, Ok, Result
from train.core.structured import as_str_dict, get_str

__all__ = [
    "CodebaseError",
    "check_codebase",
    "list_packages",
    "package_path",
]


@dataclass(frozen=True, slots=True)
class CodebaseError:
    """Error validating the invocation directory.

    Attributes:
        message: Error description
        path: Offending path, if any
    """

    message: str
    path: Path | None = None


def _manifest_name(path: Path) -> str | None:
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    data = as_str_dict(obj)
    if data is None:
        return None
    return get_str(data, "name")


def check_codebase(root: Path, config: Config) -> Result[None, CodebaseError]:
    """Ensure ``root`` is a git working copy of the expected codebase.

    When ``config.codebase_name`` is set, the root ``package.json`` must
    declare that name.
    """
    if not (root / ".git").exists():
        return Err(CodebaseError(f"{root} is not a git working copy", path=root))

    if config.codebase_name is None:
        return Ok(None)

    manifest = root / "package.json"
    name = _manifest_name(manifest)
    if name != config.codebase_name:
        return Err(
            CodebaseError(
                f"This CLI needs to be run in the {config.codebase_name} codebase.",
                path=manifest,
            )
        )
    return Ok(None)


def package_path(root: Path, config: Config, name: str) -> Path:
    return root / config.packages_root / name


def list_packages(root: Path, config: Config) -> tuple[str, ...]:
    """Return the package directory names to release.

    Configured packages are returned as-is (even when absent on disk, so the
    caller can warn about them); otherwise every directory under the
    packages root is used, sorted by name.
    """
    if config.packages:
        return config.packages

    packages_dir = root / config.packages_root
    if not packages_dir.is_dir():
        return ()
    return tuple(
        sorted(p.name for p in packages_dir.iterdir() if p.is_dir() and not p.name.startswith("."))
    )
