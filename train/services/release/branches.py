"""Train branch resolution.

Decides which local branch a release is built on and issues the git
commands to get there. The decision tree, in order:

1. Already on ``train-N``: pull it from the remote.
2. ``train-N`` exists locally: check it out, then pull it.
3. ``train-N`` exists on the remote (after a fetch): check it out tracking
   the remote branch.
4. Otherwise: check out the default branch, pull it, and create
   ``train-N`` from it.

In dry-run mode every mutating command is recorded as skipped instead of
executed, and precondition violations become warnings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

from train.core.result import Err, Ok, Result
from train.git.repository import GitError
from train.output.console import ConsoleProtocol
from train.release.contracts import CutRequest
from train.release.errors import ReleaseError
from train.release.report import Report
from train.services.release.steps import explain, git_failure, run_step
from train.services.release.versions import TrainVersions, train_branch_name

__all__ = [
    "BranchOps",
    "BranchRef",
    "BranchResolution",
    "REMOTE_BRANCH_MISSING",
    "check_preconditions",
    "local_train_branch",
    "remote_train_branch",
    "resolve_branch",
]

logger = logging.getLogger(__name__)

# Substring of git's stderr when fetching a branch the remote does not have.
REMOTE_BRANCH_MISSING = "couldn't find remote ref"

BranchScope = Literal["local", "remote"]
ResolutionAction = Literal["pulled", "checked_out", "tracked", "created"]


class BranchOps(Protocol):
    """The git capabilities branch resolution relies on."""

    def is_clean(self) -> Result[bool, GitError]: ...

    def log_oneline(
        self, revision_range: str, path: str | None = None
    ) -> Result[str, GitError]: ...

    def local_branch_exists(self, name: str) -> bool: ...

    def remote_branch_exists(self, remote: str, name: str) -> bool: ...

    def checkout(self, name: str) -> Result[str, GitError]: ...

    def checkout_tracking(self, name: str, remote: str) -> Result[str, GitError]: ...

    def create_branch(self, name: str) -> Result[str, GitError]: ...

    def pull(self, remote: str, branch: str) -> Result[str, GitError]: ...

    def fetch(self, remote: str, branch: str) -> Result[str, GitError]: ...


@dataclass(frozen=True, slots=True)
class BranchRef:
    name: str
    exists: bool
    scope: BranchScope


@dataclass(frozen=True, slots=True)
class BranchResolution:
    branch: str
    action: ResolutionAction


def local_train_branch(git: BranchOps, train: int) -> BranchRef:
    name = train_branch_name(train)
    logger.debug("Inspecting local branches to see if %s branch exists.", name)
    return BranchRef(name=name, exists=git.local_branch_exists(name), scope="local")


def remote_train_branch(git: BranchOps, remote: str, train: int) -> BranchRef:
    name = train_branch_name(train)
    logger.debug("Inspecting remote branches to see if %s/%s branch exists.", remote, name)
    return BranchRef(
        name=f"{remote}/{name}",
        exists=git.remote_branch_exists(remote, name),
        scope="remote",
    )


def check_preconditions(
    git: BranchOps,
    request: CutRequest,
    *,
    current_branch: str,
    last_tag: str,
    console: ConsoleProtocol,
    report: Report,
) -> Result[None, ReleaseError]:
    """Refuse to release from a state that would produce a bad train.

    The unpushed-commits check only applies to train releases: a patch on
    the default branch is already refused outright.
    """
    violations: list[str] = []

    match git.is_clean():
        case Ok(True):
            pass
        case Ok(False):
            violations.append(
                f"The current branch ({current_branch}) is not clean. "
                "Please commit or stash your changes before Releasing."
            )
        case Err(e):
            violations.append(f"Could not inspect the working tree: {e.message}")

    logger.debug("Ensuring there are new commits on the current branch since %s.", last_tag)
    match git.log_oneline(f"{last_tag}..HEAD"):
        case Ok(log) if log.strip():
            pass
        case Ok(_):
            violations.append(
                f"The current branch ({current_branch}) has no new commits "
                f"since the last release tag ({last_tag})."
            )
        case Err(e):
            violations.append(f"Could not list commits since {last_tag}: {e.message}")

    on_default = current_branch == request.default_branch
    if request.kind == "patch" and on_default:
        violations.append(
            f"You are trying to release a Patch on the default {request.default_branch} "
            "branch. Please switch to a Train branch."
        )

    if request.kind == "train" and on_default:
        upstream = f"{request.remote}/{request.default_branch}"
        logger.debug("Ensuring the default branch is up to date with %s.", upstream)
        match git.log_oneline(f"{upstream}..HEAD"):
            case Ok(log) if log.strip():
                violations.append(
                    f"The default branch ({current_branch}) has unpushed commits. "
                    "Please push your commits before Releasing."
                )
            case Ok(_):
                pass
            case Err(e):
                violations.append(f"Could not compare with {upstream}: {e.message}")

    if not violations:
        return Ok(None)

    if not request.dry_run:
        return Err(ReleaseError(kind="precondition_failed", message=violations[0]))

    for message in violations:
        console.warning(message)
        report.warn(message)
    return Ok(None)


def resolve_branch(
    git: BranchOps,
    request: CutRequest,
    *,
    current_branch: str,
    versions: TrainVersions,
    console: ConsoleProtocol,
    report: Report,
) -> Result[BranchResolution, ReleaseError]:
    """Put the working copy on the train branch for ``versions.next``."""
    remote = request.remote
    default = request.default_branch
    local = local_train_branch(git, versions.next.train)
    name = local.name

    if current_branch == name:
        pulled = run_step(
            report,
            console=console,
            dry_run=request.dry_run,
            description="The current branch is the train branch; pulling latest from it.",
            command=f"git pull {remote} {name}",
            action=lambda: git.pull(remote, name),
        )
        if isinstance(pulled, Err):
            return pulled
        return Ok(BranchResolution(branch=name, action="pulled"))

    if local.exists:
        explain(
            console,
            "We are not on a train branch, but we found it locally so we'll switch to it "
            "and attempt to pull in the latest changes from the remote.",
            dry_run=request.dry_run,
        )
        for description, command, action in (
            (
                f"Checking out the {name} branch.",
                f"git checkout {name}",
                lambda: git.checkout(name),
            ),
            (
                f"Pulling the latest {name} branch changes from {remote} remote.",
                f"git pull {remote} {name}",
                lambda: git.pull(remote, name),
            ),
        ):
            done = run_step(
                report,
                console=console,
                dry_run=request.dry_run,
                description=description,
                command=command,
                action=action,
            )
            if isinstance(done, Err):
                return done
        return Ok(BranchResolution(branch=name, action="checked_out"))

    explain(
        console,
        "We're not on a train branch; checking to see if one exists on the remote.",
        dry_run=request.dry_run,
    )
    logger.debug("Attempting to fetch the %s branch from %s remote.", name, remote)
    fetched = git.fetch(remote, name)
    if isinstance(fetched, Err) and REMOTE_BRANCH_MISSING not in fetched.error.stderr:
        return Err(
            git_failure(
                f"Fetching {name} from {remote}", f"git fetch {remote} {name}", fetched.error
            )
        )

    if remote_train_branch(git, remote, versions.next.train).exists:
        tracked = run_step(
            report,
            console=console,
            dry_run=request.dry_run,
            description=(
                "Remote train branch found; checking it out and attaching it to the remote."
            ),
            command=f"git checkout --track -b {name} {remote}/{name}",
            action=lambda: git.checkout_tracking(name, remote),
        )
        if isinstance(tracked, Err):
            return tracked
        return Ok(BranchResolution(branch=name, action="tracked"))

    explain(
        console,
        f"{name} branch not found on local or remote; creating one from {default} branch.",
        dry_run=request.dry_run,
    )
    for description, command, action in (
        (
            f"Checking out the {default} branch.",
            f"git checkout {default}",
            lambda: git.checkout(default),
        ),
        (
            f"Pulling the latest {default} branch changes from {remote} remote.",
            f"git pull {remote} {default}",
            lambda: git.pull(remote, default),
        ),
        (
            f"Creating new {name} branch off {default} branch.",
            f"git checkout -b {name}",
            lambda: git.create_branch(name),
        ),
    ):
        done = run_step(
            report,
            console=console,
            dry_run=request.dry_run,
            description=description,
            command=command,
            action=action,
        )
        if isinstance(done, Err):
            return done
    return Ok(BranchResolution(branch=name, action="created"))
