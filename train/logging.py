"""Logging configuration for the train CLI.

Diagnostic logging (which git command ran and why) is separate from the
console output operators read: it only shows up with ``--verbose``.
"""

import logging
import sys
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(
    verbose: bool = False,
    no_color: bool = False,
    stream: TextIO = sys.stderr,
) -> None:
    """Configure logging for one invocation.

    Args:
        verbose: Log every git invocation and its purpose (DEBUG)
        no_color: Disable colored log output
        stream: Output stream for logs
    """
    level = logging.DEBUG if verbose else logging.INFO

    console = Console(
        file=stream,
        force_terminal=None if not no_color else False,
        no_color=no_color,
    )
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        show_level=verbose,
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
