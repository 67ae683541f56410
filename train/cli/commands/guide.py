"""Guide command - explain the release train vocabulary."""

from __future__ import annotations

import os
from pathlib import Path

from rich.console import Console
from rich.table import Table

from train.cli.context import ROOT_ENV
from train.core.config import load_repo_config
from train.core.result import Ok

GLOSSARY: tuple[tuple[str, str], ...] = (
    ("Release", "A tagged version of every package in the repository, vMAJOR.TRAIN.PATCH."),
    ("Train", "A scheduled release: the middle version number goes up, patch resets to 0."),
    ("Patch", "An out-of-cycle fix on an existing train branch: only the patch number goes up."),
    ("Owner", "The person cutting the release; they confirm the push and log the deploy ticket."),
    ("Package", "A directory under the packages root with its own changelog and manifest."),
    ("Tag", "An annotated git tag marking the release commit."),
    ("Remote", "The git remote the train branch and tag are pushed to."),
    (
        "Pending release",
        "Cut and tagged locally but not pushed. Resume it with `train push --id <id>`; "
        "it expires after 14 days.",
    ),
)

STEPS: tuple[str, ...] = (
    "train cut --dry            see what a train release would do",
    "train cut                  cut, tag, then type 'push' to publish",
    "train cut --type patch     from a train branch, release a patch",
    "train push --id <id>       push a release that was cut earlier",
)


def _repo_url() -> str | None:
    env_root = os.environ.get(ROOT_ENV)
    root = Path(env_root) if env_root else Path.cwd()
    match load_repo_config(root):
        case Ok(config):
            return config.repo_url
        case _:
            return None


def guide() -> None:
    """Show how a release train works and which commands drive it."""
    console = Console(highlight=False)

    table = Table(title="Release train glossary")
    table.add_column("Term", style="bold", no_wrap=True)
    table.add_column("Meaning")
    for term, meaning in GLOSSARY:
        table.add_row(term, meaning)
    console.print(table)

    console.print()
    console.print("Typical flow:", style="bold")
    for step in STEPS:
        console.print(f"  {step}", markup=False)

    repo_url = _repo_url()
    if repo_url is not None:
        console.print()
        console.print(f"Repository: {repo_url}", markup=False)
