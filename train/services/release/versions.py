from __future__ import annotations

import re
from dataclasses import dataclass

from train.core.result import Err, Ok, Result
from train.release.contracts import ReleaseKind
from train.release.errors import ReleaseError


_TAG_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


@dataclass(frozen=True, slots=True, order=True)
class ReleaseVersion:
    major: int
    train: int
    patch: int

    @property
    def version(self) -> str:
        return f"{self.major}.{self.train}.{self.patch}"

    @property
    def tag(self) -> str:
        return f"v{self.version}"

    def bump(self, kind: ReleaseKind) -> ReleaseVersion:
        match kind:
            case "train":
                return ReleaseVersion(self.major, self.train + 1, 0)
            case "patch":
                return ReleaseVersion(self.major, self.train, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected release kind: {kind}")


@dataclass(frozen=True, slots=True)
class TrainVersions:
    current: ReleaseVersion
    next: ReleaseVersion

    @property
    def branch(self) -> str:
        return train_branch_name(self.next.train)


def train_branch_name(train: int) -> str:
    return f"train-{train}"


def parse_tag(tag: str) -> Result[ReleaseVersion, ReleaseError]:
    m = _TAG_RE.match(tag.strip())
    if m is None:
        return Err(
            ReleaseError(
                kind="parse_error",
                message=f'Could not parse Release version from value "{tag}".',
                hint="expected vMAJOR.TRAIN.PATCH",
            )
        )
    return Ok(ReleaseVersion(int(m.group(1)), int(m.group(2)), int(m.group(3))))


def next_versions(last_tag: str, kind: ReleaseKind) -> Result[TrainVersions, ReleaseError]:
    """Current version parsed from ``last_tag`` and the version to release next."""
    parsed = parse_tag(last_tag)
    if isinstance(parsed, Err):
        return parsed
    current = parsed.value
    return Ok(TrainVersions(current=current, next=current.bump(kind)))
