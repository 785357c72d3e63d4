"""Git availability probe.

Lets callers decide up front whether git based filtering can be used,
instead of catching the resolver errors.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pathlister.errors import GitUnavailableError
from pathlister.repo.resolver import load_git


class GitAvailability(str, Enum):
    """Outcome of a git probe."""
    AVAILABLE = "available"
    GIT_NOT_FOUND = "git_not_found"
    NOT_A_REPOSITORY = "not_a_repository"


@dataclass
class GitProbe:
    """
    Result of ``probe_git``

    Attributes:
        status: Availability of git for the probed path
        working_tree: Root of the working tree containing the path
        version: Version reported by the git executable
        message: Human readable detail
    """
    status: GitAvailability
    working_tree: Optional[Path] = None
    version: Optional[str] = None
    message: str = ""

    @property
    def available(self) -> bool:
        return self.status == GitAvailability.AVAILABLE


def probe_git(path: Path | str) -> GitProbe:
    """
    Check that git can be run and that ``path`` is inside a working tree.

    Args:
        path: Directory to be listed with git filtering

    Returns:
        GitProbe describing what is available
    """
    try:
        git = load_git()
    except GitUnavailableError as e:
        return GitProbe(GitAvailability.GIT_NOT_FOUND, message=str(e))

    try:
        version = git.Git().version().strip()
    except (git.GitCommandNotFound, git.GitCommandError, OSError) as e:
        return GitProbe(GitAvailability.GIT_NOT_FOUND, message=f"Cannot run git: {e}")

    try:
        repo = git.Repo(path, search_parent_directories=True)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError):
        return GitProbe(
            GitAvailability.NOT_A_REPOSITORY,
            version=version,
            message=f"Not a git repository: {path}",
        )

    if repo.bare or repo.working_tree_dir is None:
        return GitProbe(
            GitAvailability.NOT_A_REPOSITORY,
            version=version,
            message=f"Bare repository without working tree: {path}",
        )

    return GitProbe(
        GitAvailability.AVAILABLE,
        working_tree=Path(repo.working_tree_dir).resolve(),
        version=version,
        message=version,
    )
