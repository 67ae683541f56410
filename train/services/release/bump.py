"""Per-package version and changelog bumps.

Version bumps are textual: in each version-bearing manifest the first
occurrence of the current version string is replaced, the rest of the file
is left byte-for-byte untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from train.core.result import Err, Ok, Result
from train.release.errors import ReleaseError
from train.services.release.commits import ChangeSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackageBump:
    package: str
    modified: bool
    files: tuple[Path, ...] = ()


def _io_error(action: str, path: Path, e: OSError) -> ReleaseError:
    return ReleaseError(kind="io_error", message=f"failed to {action}: {e}", hint=str(path))


def bump_versions(
    package_dir: Path,
    current_version: str,
    next_version: str,
    version_files: tuple[str, ...],
) -> Result[list[Path], ReleaseError]:
    written: list[Path] = []
    for filename in version_files:
        path = package_dir / filename
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            return Err(_io_error("read manifest", path, e))

        if current_version not in text:
            logger.debug("%s does not mention %s; leaving it alone.", path, current_version)
            continue

        try:
            path.write_text(text.replace(current_version, next_version, 1), encoding="utf-8")
        except OSError as e:
            return Err(_io_error("write manifest", path, e))
        written.append(path)
    return Ok(written)


def changelog_section(next_version: str, message: str) -> str:
    return f"## {next_version}\n\n{message.rstrip()}\n"


def insert_section(text: str, section: str, title: str) -> str:
    """Insert ``section`` right below ``title``, or at the top without one."""
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if line.strip() == title:
            head = lines[: i + 1]
            tail = lines[i + 1 :]
            while tail and not tail[0].strip():
                tail.pop(0)
            parts = ["\n".join(head), section.rstrip()]
            if tail:
                parts.append("\n".join(tail))
            return "\n\n".join(parts) + "\n"

    body = text.lstrip("\n")
    if not body:
        return section
    return f"{section.rstrip()}\n\n{body}"


def bump_changelog(
    package_dir: Path,
    next_version: str,
    message: str,
    *,
    changelog_file: str,
    title: str,
) -> Result[Path, ReleaseError]:
    """Add a ``## {next_version}`` section to the package changelog.

    A missing changelog is created with the canonical title.
    """
    path = package_dir / changelog_file
    section = changelog_section(next_version, message)
    try:
        existing = path.read_text(encoding="utf-8") if path.is_file() else f"{title}\n"
        path.write_text(insert_section(existing, section, title), encoding="utf-8")
    except OSError as e:
        return Err(_io_error("update changelog", path, e))
    return Ok(path)


def bump_package(
    package: str,
    package_dir: Path,
    *,
    current_version: str,
    next_version: str,
    summary: ChangeSummary,
    version_files: tuple[str, ...],
    changelog_file: str,
    changelog_title: str,
    dry_run: bool,
) -> Result[PackageBump, ReleaseError]:
    """Apply the version and changelog bump for one package.

    Packages without classified changes are never touched, and a dry run
    never writes; both still report whether the package counts as modified.
    """
    if not summary.has_changes:
        return Ok(PackageBump(package=package, modified=False))
    if dry_run:
        logger.debug("Dry run; not writing %s.", package_dir)
        return Ok(PackageBump(package=package, modified=True))

    changelog = bump_changelog(
        package_dir,
        next_version,
        summary.message,
        changelog_file=changelog_file,
        title=changelog_title,
    )
    if isinstance(changelog, Err):
        return changelog

    manifests = bump_versions(package_dir, current_version, next_version, version_files)
    if isinstance(manifests, Err):
        return manifests

    files = (changelog.value, *manifests.value)
    return Ok(PackageBump(package=package, modified=True, files=files))
