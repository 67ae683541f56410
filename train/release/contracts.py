"""Per-invocation requests shared between the CLI and the workflows."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from train.core.config import Config

ReleaseKind = Literal["train", "patch"]
RELEASE_KINDS: tuple[ReleaseKind, ...] = ("train", "patch")


@dataclass(frozen=True, slots=True)
class CutRequest:
    """Normalized ``cut`` invocation."""

    root: Path
    config: Config
    kind: ReleaseKind = "train"
    remote: str = "origin"
    default_branch: str = "main"
    dry_run: bool = False
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class PushRequest:
    """Normalized ``push`` invocation."""

    root: Path
    config: Config
    release_id: str | None = None
    remote: str = "origin"
    default_branch: str = "main"
    verbose: bool = False
