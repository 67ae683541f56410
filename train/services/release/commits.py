"""Conventional-commit classification and changelog rendering.

Input is ``git log --pretty=oneline --abbrev-commit`` output scoped to one
package: one ``<hash> <subject>`` per line, newest first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

CommitType = Literal[
    "feat", "fix", "docs", "style", "perf", "refactor", "revert", "test", "chore", "other"
]

# Display order of changelog sections.
COMMIT_TYPES: dict[CommitType, str] = {
    "feat": "New features",
    "fix": "Bug fixes",
    "docs": "Documentation changes",
    "style": "Style changes",
    "perf": "Performance improvements",
    "refactor": "Refactorings",
    "revert": "Reverts",
    "test": "Test changes",
    "chore": "Other changes",
    "other": "Uncategorized changes",
}

IGNORED_TYPES = frozenset({"Merge", "Release"})
NO_CHANGES = "No changes."

_SUBJECT_RE = re.compile(
    r"^(?P<type>[A-Za-z]+)(?=[(!:\s]|$)(?:\((?P<area>[^)]*)\))?(?P<colon>!?:)?\s*(?P<message>.*)$"
)


@dataclass(frozen=True, slots=True)
class PackageCommit:
    hash: str
    message: str
    type: CommitType
    area: str | None
    original: str


@dataclass(frozen=True, slots=True)
class ChangeSummary:
    message: str
    has_changes: bool


def classify_line(line: str) -> PackageCommit | None:
    """Classify one log line; None for blank lines and ignored commits."""
    stripped = line.strip()
    if not stripped:
        return None

    commit_hash, _, subject = stripped.partition(" ")
    subject = subject.strip()

    m = _SUBJECT_RE.match(subject)
    if m is not None:
        kind = m.group("type")
        if kind in IGNORED_TYPES:
            return None
        if kind in COMMIT_TYPES and kind != "other" and m.group("colon"):
            area = (m.group("area") or "").strip() or None
            return PackageCommit(
                hash=commit_hash,
                message=m.group("message").strip(),
                type=kind,  # type: ignore[arg-type]
                area=area,
                original=stripped,
            )

    return PackageCommit(
        hash=commit_hash, message=subject, type="other", area=None, original=stripped
    )


def classify_commits(log: str) -> list[PackageCommit]:
    """Typed commits in log order, with merge and release commits dropped."""
    commits: list[PackageCommit] = []
    for line in log.splitlines():
        commit = classify_line(line)
        if commit is not None:
            commits.append(commit)
    return commits


def _commit_link(commit_hash: str, repo_url: str | None) -> str:
    if repo_url is None:
        return commit_hash
    return f"[{commit_hash}]({repo_url}/commit/{commit_hash})"


def render_changes(commits: list[PackageCommit], *, repo_url: str | None) -> ChangeSummary:
    """Group commits into markdown sections in display order."""
    sections: list[str] = []
    for kind, title in COMMIT_TYPES.items():
        of_kind = [c for c in commits if c.type == kind]
        if not of_kind:
            continue
        items = "".join(
            f"\n- {f'{c.area}: ' if c.area else ''}{c.message} ({_commit_link(c.hash, repo_url)})"
            for c in of_kind
        )
        sections.append(f"### {title}\n{items}")

    if not sections:
        return ChangeSummary(message=NO_CHANGES, has_changes=False)
    return ChangeSummary(message="\n\n".join(sections), has_changes=True)
