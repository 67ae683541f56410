"""Error types for the release bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "parse_error",
    "precondition_failed",
    "git_command_failed",
    "not_found",
    "required_option",
    "configuration",
    "io_error",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    ``kind`` is one of: ``parse_error`` (malformed version tag),
    ``precondition_failed`` (dirty tree, no new commits, wrong branch,
    unpushed default branch), ``git_command_failed``, ``not_found``
    (missing or unreadable pending release), ``required_option``,
    ``configuration`` (wrong codebase, unknown remote, bad settings) and
    ``io_error`` (a package file or the release store could not be written).
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
