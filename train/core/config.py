"""Typed configuration loading.

Settings live in an optional ``train.toml`` at the repository root, or in a
``[tool.train]`` table of the root ``pyproject.toml``. Everything has a
default, so a repository without either file still works.

Example ``train.toml``:

    remote = "upstream"
    default_branch = "main"
    packages_root = "packages"
    packages = ["auth-server", "content-server"]
    repo_url = "https://github.com/example/monorepo"
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "DEFAULT_BRANCH",
    "DEFAULT_REMOTE",
    "load_config",
    "load_repo_config",
]

CONFIG_FILENAME = "train.toml"

DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "main"
DEFAULT_PACKAGES_ROOT = "packages"
DEFAULT_VERSION_FILES = ("package.json", "package-lock.json")
DEFAULT_CHANGELOG_FILE = "CHANGELOG.md"
DEFAULT_CHANGELOG_TITLE = "# Change history"
DEFAULT_AUTHORS_FILE = "AUTHORS"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Repository-level release settings.

    Attributes:
        remote: Git remote releases are pushed to
        default_branch: Branch new trains are cut from
        packages_root: Directory (relative to the repo root) holding packages
        packages: Explicit package directory names; empty means "all of them"
        repo_url: Web URL of the repository, used for links in changelogs
        codebase_name: Expected ``name`` in the root package.json, if any
        version_files: Manifest filenames carrying the package version
        changelog_file: Per-package changelog filename
        changelog_title: Canonical first line new sections are inserted under
        authors_file: Contributors file at the repo root ("" disables it)
        deploy_ticket_url: Where to log deploy tickets for train releases
        store_dir: Pending-release directory override
    """

    remote: str = DEFAULT_REMOTE
    default_branch: str = DEFAULT_BRANCH
    packages_root: str = DEFAULT_PACKAGES_ROOT
    packages: tuple[str, ...] = ()
    repo_url: str | None = None
    codebase_name: str | None = None
    version_files: tuple[str, ...] = DEFAULT_VERSION_FILES
    changelog_file: str = DEFAULT_CHANGELOG_FILE
    changelog_title: str = DEFAULT_CHANGELOG_TITLE
    authors_file: str = DEFAULT_AUTHORS_FILE
    deploy_ticket_url: str | None = None
    store_dir: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        authors = data.get("authors_file")
        return cls(
            remote=get_str(data, "remote") or DEFAULT_REMOTE,
            default_branch=get_str(data, "default_branch") or DEFAULT_BRANCH,
            packages_root=get_str(data, "packages_root") or DEFAULT_PACKAGES_ROOT,
            packages=get_str_list(data, "packages") or (),
            repo_url=_strip_slash(get_str(data, "repo_url")),
            codebase_name=get_str(data, "codebase_name"),
            version_files=get_str_list(data, "version_files") or DEFAULT_VERSION_FILES,
            changelog_file=get_str(data, "changelog_file") or DEFAULT_CHANGELOG_FILE,
            changelog_title=get_str(data, "changelog_title") or DEFAULT_CHANGELOG_TITLE,
            # An explicit empty string turns the authors update off.
            authors_file=(
                authors.strip() if isinstance(authors, str) else DEFAULT_AUTHORS_FILE
            ),
            deploy_ticket_url=get_str(data, "deploy_ticket_url"),
            store_dir=get_str(data, "store_dir"),
        )


def _strip_slash(url: str | None) -> str | None:
    return url.rstrip("/") if url else None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load configuration from a TOML file.

    For ``pyproject.toml`` only the ``[tool.train]`` table is read.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    data = result.value
    if path.name == "pyproject.toml":
        data = get_table(get_table(data, "tool") or {}, "train") or {}

    try:
        return Ok(Config.from_dict(data))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_repo_config(root: Path) -> Result[Config, ConfigError]:
    """Load settings for the repository at ``root``.

    ``train.toml`` wins over ``pyproject.toml``; with neither present the
    defaults are returned.
    """
    candidate = root / CONFIG_FILENAME
    if candidate.is_file():
        return load_config(candidate)

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        return load_config(pyproject)

    return Ok(Config())
