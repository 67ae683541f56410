"""Push confirmation and execution.

Per invocation the negotiation moves through:

    PROPOSED -> STOPPED                                   (dry run)
    PROPOSED -> AWAITING_CONFIRMATION -> CONFIRMED -> PUSHED -> CLEANED_UP
    PROPOSED -> AWAITING_CONFIRMATION -> ABORTED -> SAVED

A fresh release (``save=True``) is written to the store before the prompt,
so a declined prompt, an interrupted process or a failed push all leave it
resumable with ``train push --id``. Only a fully successful push deletes it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol

from train.core.config import Config
from train.core.result import Err, Ok, Result
from train.git.repository import GitError
from train.output.console import ConsoleProtocol, Style
from train.release.errors import ReleaseError
from train.services.release.store import ReleaseRecord, ReleaseStore

__all__ = [
    "CONFIRM_WORD",
    "PushOps",
    "PushOutcome",
    "negotiate_push",
    "push_commands",
    "resume_command",
]

logger = logging.getLogger(__name__)

CONFIRM_WORD = "push"
CONFIRM_PROMPT = f"Type '{CONFIRM_WORD}' to confirm. Any other response will abort"

PushState = Literal["stopped", "saved", "aborted", "cleaned_up"]
Ask = Callable[[str], str]


class PushOps(Protocol):
    def push(self, remote: str, refspec: str) -> Result[str, GitError]: ...


@dataclass(frozen=True, slots=True)
class PushOutcome:
    state: PushState
    release_id: str | None = None

    @property
    def pushed(self) -> bool:
        return self.state == "cleaned_up"


def push_commands(remote: str, record: ReleaseRecord) -> tuple[tuple[str, str], tuple[str, str]]:
    """(remote, refspec) pairs: the branch first, then the tag."""
    return (
        (remote, f"{record.branch}:{record.branch}"),
        (remote, record.tag),
    )


def resume_command(release_id: str) -> str:
    return f"train push --id {release_id}"


def _print_not_pushed(console: ConsoleProtocol, release_id: str | None) -> None:
    console.newline()
    if release_id is None:
        console.print("Your changes have not been pushed.", Style.WARNING)
        return
    console.print(
        "Your changes have not been pushed. When you are ready to push you can run the following:",
        Style.WARNING,
    )
    console.print(resume_command(release_id), Style.COMMAND)


def print_followup(
    record: ReleaseRecord,
    *,
    config: Config,
    default_branch: str,
    console: ConsoleProtocol,
) -> None:
    """Tell the operator what to do once the release is on the remote."""
    console.newline()
    console.success(f"Pushed {record.branch} and {record.tag}.")

    if config.repo_url is not None:
        console.print("Open a pull request to merge the release back into the default branch:")
        console.print(
            f"{config.repo_url}/compare/{default_branch}...{record.branch}?expand=1", Style.COMMAND
        )

    if record.type == "train":
        console.newline()
        if config.deploy_ticket_url is not None:
            console.print(
                f"Remember to log a deploy ticket for this train: {config.deploy_ticket_url}"
            )
        else:
            console.print("Remember to log a deploy ticket for this train.")

    if record.modified_packages:
        console.newline()
        console.print("Changelogs for the modified packages:")
        for package in record.modified_packages:
            rel = f"{config.packages_root}/{package}/{config.changelog_file}"
            if config.repo_url is not None:
                console.print(f"- {package}: {config.repo_url}/blob/{record.tag}/{rel}")
            else:
                console.print(f"- {package}: {rel}")


def negotiate_push(
    git: PushOps,
    store: ReleaseStore,
    record: ReleaseRecord,
    *,
    config: Config,
    remote: str,
    default_branch: str,
    console: ConsoleProtocol,
    ask: Ask,
    dry_run: bool = False,
    save: bool = True,
    release_id: str | None = None,
) -> Result[PushOutcome, ReleaseError]:
    """Ask for the literal confirmation word, then push branch and tag.

    Args:
        save: True for a freshly cut release (persist it under a new id);
            False when resuming ``release_id`` from the store
        release_id: Id of the stored release being resumed
    """
    commands = push_commands(remote, record)

    if dry_run:
        console.info("Asking for confirmation to push changes.")
        for cmd_remote, refspec in commands:
            console.print(f"conditional: git push {cmd_remote} {refspec}", Style.COMMAND)
        return Ok(PushOutcome(state="stopped"))

    if save:
        saved = store.save(record)
        if isinstance(saved, Err):
            return saved
        release_id = saved.value

    console.newline()
    console.print(
        f"Important: You are about to push the commits on branch {record.branch} and the tag "
        f"{record.tag} to remote {remote}. This may trigger CI jobs and deployments.",
        Style.WARNING,
    )
    answer = ask(CONFIRM_PROMPT)

    if answer != CONFIRM_WORD:
        _print_not_pushed(console, release_id)
        return Ok(PushOutcome(state="saved" if release_id else "aborted", release_id=release_id))

    for cmd_remote, refspec in commands:
        logger.debug("Pushing %s to remote %s.", refspec, cmd_remote)
        pushed = git.push(cmd_remote, refspec)
        if isinstance(pushed, Err):
            return Err(
                ReleaseError(
                    kind="git_command_failed",
                    message=f"git push {cmd_remote} {refspec} failed: {pushed.error.message}",
                    hint=resume_command(release_id) if release_id else None,
                )
            )

    if release_id is not None:
        deleted = store.delete(release_id)
        if isinstance(deleted, Err):
            return deleted

    print_followup(record, config=config, default_branch=default_branch, console=console)
    return Ok(PushOutcome(state="cleaned_up", release_id=release_id))
