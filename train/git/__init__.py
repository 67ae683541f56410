"""Git operations for the release workflows.

Usage:
    from train.git import Repository

    repo = Repository(Path("/path/to/monorepo"))
    print(repo.current_branch())
"""

from train.git.repository import GitError, Repository, parse_branch_list

__all__ = [
    "GitError",
    "Repository",
    "parse_branch_list",
]
