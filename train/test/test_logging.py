from __future__ import annotations

import io
import logging

from rich.logging import RichHandler

from train.logging import configure_logging


def test_verbose_enables_debug() -> None:
    configure_logging(verbose=True, no_color=True, stream=io.StringIO())
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in root.handlers)


def test_default_level_hides_debug() -> None:
    stream = io.StringIO()
    configure_logging(verbose=False, no_color=True, stream=stream)

    logging.getLogger("train.platform.process").debug("executed: git status")

    assert logging.getLogger().level == logging.INFO
    assert "executed" not in stream.getvalue()
