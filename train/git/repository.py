"""Git repository abstraction.

This module provides the Repository class wrapping the git commands the
release workflows need. Queries parse git's porcelain-ish output; every
method that can fail returns a Result.

Usage:
    repo = Repository(Path("/path/to/monorepo"))

    match repo.log_oneline("v149.3.0..HEAD"):
        case Ok(log):
            print(log)
        case Err(e):
            print(f"Error: {e.message}")

    if repo.local_branch_exists("train-4"):
        repo.checkout("train-4")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from train.core.result import Err, Ok, Result
from train.platform.process import ProcessError
from train.platform.process import run as run_process

__all__ = [
    "GitError",
    "Repository",
    "parse_branch_list",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed (e.g. "push origin v1.2.0")
        message: Error message
        returncode: Process return code
        stderr: Raw error output, kept for callers that tolerate known failures
    """

    command: str
    message: str
    returncode: int = 1
    stderr: str = ""


def parse_branch_list(output: str) -> list[str]:
    """Parse ``git branch [-r]`` output into plain branch names.

    Drops the current-branch marker and symbolic refs such as
    ``origin/HEAD -> origin/main``.
    """
    names: list[str] = []
    for raw in output.splitlines():
        line = raw.strip().removeprefix("* ").strip()
        if not line or " -> " in line or line.startswith("("):
            continue
        names.append(line)
    return names


class Repository:
    """Git working copy used for releases.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_branch(self) -> str | None:
        """Get current branch name; None on detached HEAD or error."""
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def is_clean(self) -> Result[bool, GitError]:
        """True when ``git status --porcelain`` reports nothing."""
        return self._git(["status", "--porcelain"]).map(lambda out: out.strip() == "")

    def tags(self) -> Result[list[str], GitError]:
        """All tags, oldest version first."""
        return self._git(["tag", "-l", "--sort=version:refname"]).map(
            lambda out: [t.strip() for t in out.splitlines() if t.strip()]
        )

    def describe_last_tag(self) -> Result[str, GitError]:
        """Nearest tag reachable through first parents of HEAD."""
        return self._git(["describe", "--tags", "--first-parent", "--abbrev=0"]).map(str.strip)

    def log_oneline(self, revision_range: str, path: str | None = None) -> Result[str, GitError]:
        """One line per commit (``<short hash> <subject>``), optionally scoped to a path."""
        args = ["log", revision_range, "--no-color", "--pretty=oneline", "--abbrev-commit"]
        if path is not None:
            args += ["--", path]
        return self._git(args).map(str.strip)

    def shortlog_authors(self) -> Result[list[str], GitError]:
        """Contributor names from ``git shortlog -s -n HEAD``."""

        def parse(out: str) -> list[str]:
            authors: list[str] = []
            for line in out.splitlines():
                parts = line.strip().split(None, 1)
                if len(parts) == 2 and parts[0].isdigit():
                    authors.append(parts[1].strip())
            return authors

        return self._git(["shortlog", "-s", "-n", "HEAD"]).map(parse)

    def remote_names(self) -> Result[list[str], GitError]:
        return self._git(["remote"]).map(lambda out: out.split())

    def local_branch_exists(self, name: str) -> bool:
        match self._git(["branch", "--no-color"]):
            case Ok(stdout):
                return name in parse_branch_list(stdout)
            case Err(_):
                return False

    def remote_branch_exists(self, remote: str, name: str) -> bool:
        match self._git(["branch", "--no-color", "-r"]):
            case Ok(stdout):
                return f"{remote}/{name}" in parse_branch_list(stdout)
            case Err(_):
                return False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def checkout(self, name: str) -> Result[str, GitError]:
        return self._git(["checkout", name])

    def checkout_tracking(self, name: str, remote: str) -> Result[str, GitError]:
        """Create local ``name`` tracking ``remote/name`` and switch to it."""
        return self._git(["checkout", "--track", "-b", name, f"{remote}/{name}"])

    def create_branch(self, name: str) -> Result[str, GitError]:
        """Create ``name`` off the current HEAD and switch to it."""
        return self._git(["checkout", "-b", name])

    def pull(self, remote: str, branch: str) -> Result[str, GitError]:
        return self._git(["pull", remote, branch])

    def fetch(self, remote: str, branch: str) -> Result[str, GitError]:
        return self._git(["fetch", remote, branch])

    def commit_all(self, message: str) -> Result[str, GitError]:
        return self._git(["commit", "-a", "-m", message])

    def tag_annotated(self, tag: str, message: str) -> Result[str, GitError]:
        return self._git(["tag", "-a", tag, "-m", message])

    def push(self, remote: str, refspec: str) -> Result[str, GitError]:
        return self._git(["push", remote, refspec])

    # ------------------------------------------------------------------

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path)

    def _git(self, args: list[str]) -> Result[str, GitError]:
        match self._run(args):
            case Ok(stdout):
                return Ok(stdout)
            case Err(e):
                return Err(
                    GitError(
                        command=" ".join(args),
                        message=e.stderr.strip() or e.stdout.strip() or f"git {args[0]} failed",
                        returncode=e.returncode,
                        stderr=e.stderr,
                    )
                )
