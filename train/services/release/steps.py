"""Dry-run aware execution of individual git steps."""

from __future__ import annotations

import logging
from collections.abc import Callable

from train.core.result import Err, Ok, Result
from train.git.repository import GitError
from train.output.console import ConsoleProtocol, Style
from train.release.errors import ReleaseError
from train.release.report import Report

logger = logging.getLogger(__name__)


def explain(console: ConsoleProtocol, message: str, *, dry_run: bool) -> None:
    """Narrate a decision: on the console during a dry run, in the debug log otherwise."""
    if dry_run:
        console.info(message)
    else:
        logger.debug("%s", message)


def git_failure(description: str, command: str, error: GitError) -> ReleaseError:
    return ReleaseError(
        kind="git_command_failed",
        message=f"{description} failed: {error.message}",
        hint=command,
    )


def run_step(
    report: Report,
    *,
    console: ConsoleProtocol,
    dry_run: bool,
    description: str,
    command: str,
    action: Callable[[], Result[str, GitError]],
) -> Result[None, ReleaseError]:
    """Run one mutating git command, or show and record it as skipped in a dry run."""
    if dry_run:
        console.info(description)
        console.print(f"skipped: {command}", Style.COMMAND)
        report.skip(description, command)
        return Ok(None)

    logger.debug("%s", description)
    result = action()
    if isinstance(result, Err):
        return Err(git_failure(description, command, result.error))
    return Ok(None)
