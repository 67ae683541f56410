"""Cut and push workflows.

``cut``: last tag -> next version -> preconditions -> train branch ->
per-package changelog/version bumps -> release commit and tag -> push
negotiation.

``push``: stored release -> push negotiation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from train.core.codebase import check_codebase, list_packages, package_path
from train.core.config import Config
from train.core.result import Err, Ok, Result
from train.git.repository import GitError
from train.output.console import ConsoleProtocol, Style
from train.release.contracts import CutRequest, PushRequest, ReleaseKind
from train.release.errors import ReleaseError
from train.release.report import Report
from train.services.release.branches import (
    BranchOps,
    BranchResolution,
    check_preconditions,
    resolve_branch,
)
from train.services.release.bump import bump_package
from train.services.release.commits import classify_commits, render_changes
from train.services.release.push import Ask, PushOps, PushOutcome, negotiate_push
from train.services.release.steps import explain, git_failure, run_step
from train.services.release.store import ReleaseRecord, ReleaseStore
from train.services.release.versions import TrainVersions, next_versions

__all__ = [
    "CutOutcome",
    "ReleaseGit",
    "cut_release",
    "find_last_tag",
    "push_release",
    "sweep_pending",
    "update_authors",
    "validate_invocation",
]

logger = logging.getLogger(__name__)


class ReleaseGit(BranchOps, PushOps, Protocol):
    """Everything the cut workflow asks of git."""

    def current_branch(self) -> str | None: ...

    def tags(self) -> Result[list[str], GitError]: ...

    def describe_last_tag(self) -> Result[str, GitError]: ...

    def shortlog_authors(self) -> Result[list[str], GitError]: ...

    def remote_names(self) -> Result[list[str], GitError]: ...

    def commit_all(self, message: str) -> Result[str, GitError]: ...

    def tag_annotated(self, tag: str, message: str) -> Result[str, GitError]: ...


@dataclass(frozen=True, slots=True)
class CutOutcome:
    versions: TrainVersions
    resolution: BranchResolution
    modified_packages: tuple[str, ...]
    push: PushOutcome


def validate_invocation(
    git: ReleaseGit, *, root: Path, config: Config, remote: str
) -> Result[None, ReleaseError]:
    """Make sure we run inside the right codebase, against a known remote."""
    checked = check_codebase(root, config)
    if isinstance(checked, Err):
        return Err(
            ReleaseError(
                kind="configuration",
                message=checked.error.message,
                hint=str(checked.error.path) if checked.error.path else None,
            )
        )

    logger.debug("Checking the existence of the specified remote (%s)", remote)
    match git.remote_names():
        case Ok(names) if remote in names:
            return Ok(None)
        case Ok(_):
            return Err(
                ReleaseError(
                    kind="configuration",
                    message=f"Could not find the {remote} Git remote.",
                )
            )
        case Err(e):
            return Err(git_failure("Listing git remotes", "git remote", e))


def sweep_pending(store: ReleaseStore) -> Result[list[str], ReleaseError]:
    """Drop pending releases that were never pushed and are too old to resume."""
    swept = store.sweep_expired()
    if isinstance(swept, Ok) and swept.value:
        logger.debug("Removed expired pending releases: %s", ", ".join(swept.value))
    return swept


def find_last_tag(git: ReleaseGit, kind: ReleaseKind) -> Result[str, ReleaseError]:
    """The tag the next release is computed from.

    A train starts from the newest train tag in the repository; a patch
    from the nearest tag on the current train branch.
    """
    if kind == "train":
        logger.debug('The Release type is "train"; retrieving the last Train Tag.')
        tags = git.tags()
        if isinstance(tags, Err):
            return Err(git_failure("Listing tags", "git tag -l --sort=version:refname", tags.error))
        candidates = [t for t in tags.value if t.startswith("v")]
        last = candidates[-1] if candidates else None
    else:
        logger.debug('The Release type is "patch"; retrieving the last Tag in this Release.')
        described = git.describe_last_tag()
        last = described.value if isinstance(described, Ok) and described.value else None

    if last is None:
        return Err(
            ReleaseError(
                kind="precondition_failed",
                message="Could not determine the last Tag. Are you on the correct branch?",
            )
        )
    return Ok(last)


def update_authors(
    git: ReleaseGit,
    *,
    root: Path,
    config: Config,
    dry_run: bool,
    console: ConsoleProtocol,
    report: Report,
) -> None:
    """Rewrite the contributors file from the commit history."""
    if not config.authors_file:
        return

    path = root / config.authors_file
    # `commit -a` only picks up tracked files, so a missing file is never created.
    if not path.is_file():
        logger.debug("%s does not exist; not updating contributors.", path)
        return

    explain(console, f"Updating {config.authors_file} file with contributors.", dry_run=dry_run)
    if dry_run:
        return

    authors = git.shortlog_authors()
    if isinstance(authors, Err):
        message = f"Could not retrieve commit authors: {authors.error.message}"
        console.warning(message)
        report.warn(message)
        return

    ordered = sorted(set(authors.value), key=lambda a: (len(a), a))
    try:
        path.write_text("\n".join(ordered) + "\n", encoding="utf-8")
    except OSError as e:
        message = f"Could not write {path}: {e}"
        console.warning(message)
        report.warn(message)


def _bump_packages(
    git: ReleaseGit,
    request: CutRequest,
    *,
    versions: TrainVersions,
    console: ConsoleProtocol,
    report: Report,
) -> Result[tuple[str, ...], ReleaseError]:
    config = request.config
    explain(
        console,
        "Bumping versions and generating changelogs for each package.",
        dry_run=request.dry_run,
    )

    modified: list[str] = []
    for package in list_packages(request.root, config):
        directory = package_path(request.root, config, package)
        if not directory.is_dir():
            message = f"Package directory {directory} does not exist; skipping {package}."
            console.warning(message)
            report.warn(message)
            continue

        scope = f"{config.packages_root}/{package}"
        logger.debug("Retrieving commits since %s for %s", versions.current.tag, package)
        log = git.log_oneline(f"{versions.current.tag}..HEAD", scope)
        if isinstance(log, Err):
            return Err(
                git_failure(f"Retrieving commits for {package}", f"git log -- {scope}", log.error)
            )

        summary = render_changes(classify_commits(log.value), repo_url=config.repo_url)
        if not summary.has_changes:
            logger.debug("%s: %s", package, summary.message)

        bumped = bump_package(
            package,
            directory,
            current_version=versions.current.version,
            next_version=versions.next.version,
            summary=summary,
            version_files=config.version_files,
            changelog_file=config.changelog_file,
            changelog_title=config.changelog_title,
            dry_run=request.dry_run,
        )
        if isinstance(bumped, Err):
            return bumped
        if bumped.value.modified:
            modified.append(package)

    return Ok(tuple(modified))


def cut_release(
    git: ReleaseGit,
    store: ReleaseStore,
    request: CutRequest,
    *,
    console: ConsoleProtocol,
    ask: Ask,
    report: Report,
) -> Result[CutOutcome, ReleaseError]:
    """Cut a train or patch release and offer to push it."""
    console.header(f"Cutting a new {request.kind.capitalize()} Release...")

    current_branch = git.current_branch()
    if current_branch is None:
        message = "Could not determine the current branch (detached HEAD?)."
        if not request.dry_run:
            return Err(ReleaseError(kind="precondition_failed", message=message))
        console.warning(message)
        report.warn(message)
        current_branch = "HEAD"

    last_tag = find_last_tag(git, request.kind)
    if isinstance(last_tag, Err):
        return last_tag

    versions = next_versions(last_tag.value, request.kind)
    if isinstance(versions, Err):
        return versions

    checked = check_preconditions(
        git,
        request,
        current_branch=current_branch,
        last_tag=last_tag.value,
        console=console,
        report=report,
    )
    if isinstance(checked, Err):
        return checked

    resolved = resolve_branch(
        git,
        request,
        current_branch=current_branch,
        versions=versions.value,
        console=console,
        report=report,
    )
    if isinstance(resolved, Err):
        return resolved

    modified = _bump_packages(git, request, versions=versions.value, console=console, report=report)
    if isinstance(modified, Err):
        return modified

    update_authors(
        git,
        root=request.root,
        config=request.config,
        dry_run=request.dry_run,
        console=console,
        report=report,
    )

    nxt = versions.value.next
    tag_message = f"{request.kind.capitalize()} release {nxt.version}"
    for description, command, action in (
        (
            "Committing release changelog and version bump changes.",
            f'git commit -a -m "Release {nxt.version}"',
            lambda: git.commit_all(f"Release {nxt.version}"),
        ),
        (
            f"Tagging the code as {nxt.tag}.",
            f'git tag -a {nxt.tag} -m "{tag_message}"',
            lambda: git.tag_annotated(nxt.tag, tag_message),
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

    branch = resolved.value.branch
    if not request.dry_run:
        console.newline()
        console.print(
            "Tagged! A Release commit has been created, and everything has been Tagged locally, "
            "but it hasn't been pushed. Before proceeding you should check that the changes "
            "appear to be sane. At the very least you should eyeball the diffs and git log.",
            Style.SUCCESS,
        )
        console.newline()
        console.print(f"- Branch: {branch}")
        console.print(f"- Tag: {nxt.tag}")

    record = ReleaseRecord(
        train=str(nxt.train),
        patch=str(nxt.patch),
        type=request.kind,
        branch=branch,
        tag=nxt.tag,
        modified_packages=modified.value,
    )
    pushed = negotiate_push(
        git,
        store,
        record,
        config=request.config,
        remote=request.remote,
        default_branch=request.default_branch,
        console=console,
        ask=ask,
        dry_run=request.dry_run,
        save=True,
    )
    if isinstance(pushed, Err):
        return pushed

    return Ok(
        CutOutcome(
            versions=versions.value,
            resolution=resolved.value,
            modified_packages=modified.value,
            push=pushed.value,
        )
    )


def push_release(
    git: PushOps,
    store: ReleaseStore,
    request: PushRequest,
    *,
    console: ConsoleProtocol,
    ask: Ask,
) -> Result[PushOutcome, ReleaseError]:
    """Resume a release that was cut earlier but not pushed."""
    if not request.release_id:
        return Err(
            ReleaseError(
                kind="required_option",
                message="The option --id <value> is required for this command",
            )
        )

    console.header(f"Resuming push for in-progress Release {request.release_id}...")
    logger.debug("Fetching %s", store.path_for(request.release_id))
    record = store.retrieve(request.release_id)
    if isinstance(record, Err):
        return record
    logger.debug("%s", record.value)

    return negotiate_push(
        git,
        store,
        record.value,
        config=request.config,
        remote=request.remote,
        default_branch=request.default_branch,
        console=console,
        ask=ask,
        save=False,
        release_id=request.release_id,
    )
