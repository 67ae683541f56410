"""Diagnostics accumulated during one invocation.

A Report is created by the command, threaded through the workflow and
handed back at the end, where ``render_summary`` prints the outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from train.output.console import ConsoleProtocol, Style

__all__ = ["Report", "SkippedCommand", "render_summary"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SkippedCommand:
    description: str
    command: str


@dataclass
class Report:
    warnings: list[str] = field(default_factory=list[str])
    errors: list[str] = field(default_factory=list[str])
    skipped: list[SkippedCommand] = field(default_factory=list[SkippedCommand])

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def skip(self, description: str, command: str) -> None:
        logger.debug("%s", description)
        logger.debug("skipped: %s", command)
        self.skipped.append(SkippedCommand(description, command))

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def render_summary(report: Report, console: ConsoleProtocol, *, verbose: bool) -> None:
    """Print the end-of-command summary."""
    if report.has_errors:
        console.newline()
        console.print("There were errors during the execution of this command.", Style.ERROR)
        if not verbose:
            console.print("Re-run this command with the --verbose flag for more details")
    elif report.has_warnings:
        console.newline()
        console.print("Completed with warnings.", Style.WARNING)
