from __future__ import annotations

import logging

import pytest

from train.output.console import MockConsole
from train.release.errors import ReleaseError
from train.release.report import Report, SkippedCommand, render_summary


def test_skip_records_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    report = Report()
    with caplog.at_level(logging.DEBUG, logger="train.release.report"):
        report.skip("Checking out the main branch.", "git checkout main")

    assert report.skipped == [SkippedCommand("Checking out the main branch.", "git checkout main")]
    assert "skipped: git checkout main" in caplog.messages


def test_summary_with_errors_suggests_verbose() -> None:
    report = Report()
    report.error("push failed")
    console = MockConsole()

    render_summary(report, console, verbose=False)

    assert console.has_error()
    assert console.find("--verbose")


def test_summary_with_errors_in_verbose_mode() -> None:
    report = Report()
    report.error("push failed")
    console = MockConsole()

    render_summary(report, console, verbose=True)

    assert not console.find("--verbose")


def test_summary_with_warnings_only() -> None:
    report = Report()
    report.warn("AUTHORS could not be written")
    console = MockConsole()

    render_summary(report, console, verbose=False)

    assert console.find("Completed with warnings.")
    assert not console.has_error()


def test_clean_summary_prints_nothing() -> None:
    console = MockConsole()
    render_summary(Report(), console, verbose=False)
    assert console.outputs == []


def test_release_error_pretty() -> None:
    assert ReleaseError(kind="not_found", message="missing").pretty() == "missing"
    error = ReleaseError(kind="git_command_failed", message="push failed", hint="train push --id 1")
    assert error.pretty() == "push failed (hint: train push --id 1)"
