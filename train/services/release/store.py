"""On-disk storage for pending (cut but not pushed) releases.

One JSON file per pending release, named ``{id}.json``. Ids are the
creation time in milliseconds, which is what operators type into
``train push --id``; expiry uses the explicit ``created_at`` field, and
only falls back to reading the id as a timestamp for files that predate it.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import cast

from train.core.result import Err, Ok, Result
from train.core.structured import as_str_dict, get_str, get_str_list
from train.platform.files import atomic_write_text
from train.release.contracts import RELEASE_KINDS, ReleaseKind
from train.release.errors import ReleaseError

__all__ = [
    "EXPIRY",
    "ReleaseRecord",
    "ReleaseStore",
    "StoredRelease",
]

logger = logging.getLogger(__name__)

EXPIRY = timedelta(days=14)
EXTENSION = ".json"
SCHEMA = 1

_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    """What ``push`` needs to finish a release.

    Only ``branch`` and ``tag`` are required; records written by older
    versions carry nothing else.
    """

    branch: str
    tag: str
    train: str = ""
    patch: str = ""
    type: ReleaseKind | None = None
    modified_packages: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StoredRelease:
    id: str
    created_at: datetime
    record: ReleaseRecord


def _millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _id_timestamp(release_id: str) -> datetime | None:
    if not release_id.isdigit():
        return None
    try:
        return datetime.fromtimestamp(int(release_id) / 1000, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_created_at(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


class ReleaseStore:
    """Filesystem-backed pending-release store.

    Attributes:
        root: Directory holding the release files (created on first use)
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def ensure_directory(self) -> Result[None, ReleaseError]:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="io_error",
                    message=f"failed to create release store: {e}",
                    hint=str(self.root),
                )
            )
        return Ok(None)

    def path_for(self, release_id: str) -> Path:
        return self.root / f"{release_id}{EXTENSION}"

    def save(
        self, record: ReleaseRecord, *, now: datetime | None = None
    ) -> Result[str, ReleaseError]:
        """Persist ``record`` under a fresh id and return the id."""
        ensured = self.ensure_directory()
        if isinstance(ensured, Err):
            return ensured

        created_at = now or datetime.now(tz=UTC)
        stamp = _millis(created_at)
        while self.path_for(str(stamp)).exists():
            stamp += 1
        release_id = str(stamp)

        payload: dict[str, object] = {
            "schema": SCHEMA,
            "id": release_id,
            "created_at": created_at.astimezone(UTC).isoformat(),
            "train": record.train,
            "patch": record.patch,
            "type": record.type,
            "branch": record.branch,
            "tag": record.tag,
            "modified_packages": list(record.modified_packages),
        }
        path = self.path_for(release_id)
        try:
            atomic_write_text(path, json.dumps(payload, indent=2) + "\n")
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="io_error",
                    message=f"failed to write pending release: {e}",
                    hint=str(path),
                )
            )
        logger.debug("Saved pending release %s to %s", release_id, path)
        return Ok(release_id)

    def load(self, release_id: str) -> Result[StoredRelease, ReleaseError]:
        """Read a stored release, including its creation time."""
        if not _ID_RE.match(release_id):
            return Err(ReleaseError(kind="not_found", message=f"invalid release id: {release_id}"))

        path = self.path_for(release_id)
        if not path.is_file():
            return Err(
                ReleaseError(
                    kind="not_found",
                    message=f"Could not find saved Release file for {release_id}",
                    hint=str(path),
                )
            )

        try:
            obj: object = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            return Err(
                ReleaseError(
                    kind="not_found",
                    message=f"failed to read saved Release file for {release_id}: {e}",
                    hint=str(path),
                )
            )

        d = as_str_dict(obj)
        branch = get_str(d, "branch") if d is not None else None
        tag = get_str(d, "tag") if d is not None else None
        if d is None or branch is None or tag is None:
            return Err(
                ReleaseError(
                    kind="not_found",
                    message="Required data not found in saved Release file",
                    hint=str(path),
                )
            )

        kind_s = get_str(d, "type")
        kind = cast(ReleaseKind, kind_s) if kind_s in RELEASE_KINDS else None
        record = ReleaseRecord(
            branch=branch,
            tag=tag,
            train=get_str(d, "train") or "",
            patch=get_str(d, "patch") or "",
            type=kind,
            modified_packages=(
                get_str_list(d, "modified_packages") or get_str_list(d, "modifiedPackages") or ()
            ),
        )
        created_at = (
            _parse_created_at(get_str(d, "created_at"))
            or _id_timestamp(release_id)
            or datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
        )
        return Ok(StoredRelease(id=release_id, created_at=created_at, record=record))

    def retrieve(self, release_id: str) -> Result[ReleaseRecord, ReleaseError]:
        return self.load(release_id).map(lambda stored: stored.record)

    def list_ids(self) -> list[str]:
        """Ids of every stored release, oldest first."""
        if not self.root.is_dir():
            return []
        ids = [
            p.stem
            for p in self.root.iterdir()
            if p.is_file() and p.suffix == EXTENSION and not p.name.startswith(".")
        ]
        return sorted(ids, key=lambda i: (not i.isdigit(), int(i) if i.isdigit() else 0, i))

    def delete(self, release_id: str) -> Result[None, ReleaseError]:
        path = self.path_for(release_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="io_error",
                    message=f"failed to delete pending release: {e}",
                    hint=str(path),
                )
            )
        logger.debug("Deleted pending release %s", release_id)
        return Ok(None)

    def sweep_expired(self, now: datetime | None = None) -> Result[list[str], ReleaseError]:
        """Delete releases created more than EXPIRY before ``now``.

        Unreadable files are aged by their id alone and kept when the id is
        not a timestamp.
        """
        moment = now or datetime.now(tz=UTC)
        removed: list[str] = []
        for release_id in self.list_ids():
            match self.load(release_id):
                case Ok(stored):
                    created_at: datetime | None = stored.created_at
                case Err(_):
                    created_at = _id_timestamp(release_id)
            if created_at is None or moment - created_at <= EXPIRY:
                continue

            deleted = self.delete(release_id)
            if isinstance(deleted, Err):
                return deleted
            removed.append(release_id)
        return Ok(removed)
