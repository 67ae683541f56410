from __future__ import annotations

from typing import NoReturn

import typer

from train.cli.context import CLIContext
from train.core.errors import ErrorCode
from train.core.result import Err
from train.release.errors import ReleaseError, ReleaseErrorKind
from train.release.report import Report, render_summary
from train.services.release.push import CONFIRM_PROMPT
from train.services.release.service import sweep_pending, validate_invocation


def exit_release(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def release_error_code(kind: ReleaseErrorKind) -> ErrorCode:
    if kind == "configuration":
        return ErrorCode.ENV_ERROR
    if kind == "git_command_failed":
        return ErrorCode.GIT_ERROR
    if kind == "io_error":
        return ErrorCode.IO_ERROR
    return ErrorCode.USER_ERROR


def fail(ctx: CLIContext, error: ReleaseError, report: Report, *, verbose: bool) -> NoReturn:
    """Abort the command: summary of what happened so far, then the error."""
    report.error(error.message)
    render_summary(report, ctx.console, verbose=verbose)
    exit_release(f"Command aborted: {error.pretty()}", code=release_error_code(error.kind))


def ask_confirmation(prompt: str = CONFIRM_PROMPT) -> str:
    return typer.prompt(prompt, default="", show_default=False)


def prepare_command(ctx: CLIContext, *, remote: str, report: Report, verbose: bool) -> None:
    """Checks shared by every command, then the pending-release sweep."""
    valid = validate_invocation(ctx.repo, root=ctx.root, config=ctx.config, remote=remote)
    if isinstance(valid, Err):
        fail(ctx, valid.error, report, verbose=verbose)

    swept = sweep_pending(ctx.store)
    if isinstance(swept, Err):
        ctx.console.warning(swept.error.pretty())
        report.warn(swept.error.message)
