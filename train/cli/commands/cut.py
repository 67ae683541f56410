"""Cut command - create a train or patch release."""

from __future__ import annotations

import os
from typing import cast

import typer

from train.cli.commands._helpers import (
    ask_confirmation,
    exit_release,
    fail,
    prepare_command,
)
from train.cli.context import build_context
from train.core.errors import ErrorCode
from train.core.result import Err
from train.release.contracts import RELEASE_KINDS, CutRequest, ReleaseKind
from train.release.report import Report, render_summary
from train.services.release.service import cut_release

REQUIRE_FORCE_ENV = "TRAIN_REQUIRE_FORCE"


def cut(
    release_type: str = typer.Option(
        "train", "--type", "-t", envvar="TRAIN_RELEASE_TYPE", help="Release type: train or patch"
    ),
    remote: str | None = typer.Option(
        None, "--remote", "-r", envvar="TRAIN_REMOTE", help="Git remote to use"
    ),
    default_branch: str | None = typer.Option(
        None, "--default-branch", "-b", envvar="TRAIN_DEFAULT_BRANCH", help="Default git branch"
    ),
    dry: bool = typer.Option(False, "--dry", "-d", help="Dry run: make no changes"),
    force: bool = typer.Option(False, "--force", help=f"Required when {REQUIRE_FORCE_ENV} is set"),
    verbose: bool = typer.Option(
        False, "--verbose", envvar="TRAIN_VERBOSE", help="Output all operations"
    ),
) -> None:
    """Cut a new release."""
    if os.environ.get(REQUIRE_FORCE_ENV) and not force:
        typer.echo(
            f"The env var {REQUIRE_FORCE_ENV} is set, requiring this command "
            "to be run with the --force flag"
        )
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if release_type not in RELEASE_KINDS:
        exit_release(
            f"invalid --type {release_type!r} (expected train or patch)",
            code=ErrorCode.USER_ERROR,
        )
    kind = cast(ReleaseKind, release_type)

    ctx = build_context(verbose=verbose)
    request = CutRequest(
        root=ctx.root,
        config=ctx.config,
        kind=kind,
        remote=remote or ctx.config.remote,
        default_branch=default_branch or ctx.config.default_branch,
        dry_run=dry,
        verbose=verbose,
    )
    report = Report()
    prepare_command(ctx, remote=request.remote, report=report, verbose=verbose)

    result = cut_release(
        ctx.repo,
        ctx.store,
        request,
        console=ctx.console,
        ask=ask_confirmation,
        report=report,
    )
    if isinstance(result, Err):
        fail(ctx, result.error, report, verbose=verbose)

    render_summary(report, ctx.console, verbose=verbose)
