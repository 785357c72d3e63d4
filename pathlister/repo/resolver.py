"""
Git change resolver

Computes the files git considers changed for the current build:
1. uncommitted: modified in the working tree or the index, or untracked
2. branch-only: touched by commits of the current branch that no other
   branch contains yet

Every git command runs in the repository working tree (never through a change
of the process working directory), and commands against the same working tree
are serialized.
"""

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pathlister.core.options import GitFilterOptions
from pathlister.errors import (
    AmbiguousGitStateError,
    GitCommandFailedError,
    GitUnavailableError,
    NotAGitRepositoryError,
)

logger = logging.getLogger(__name__)


# ============================================================
# Constants
# ============================================================

_REF_FORMAT = "%(objectname)%00%(symref)%00%(refname)"
_LOCAL_PREFIX = "refs/heads/"
_REMOTE_PREFIX = "refs/remotes/"

_REPO_LOCKS: dict[str, threading.Lock] = {}
_REPO_LOCKS_GUARD = threading.Lock()


def load_git():
    """
    Import GitPython.

    GitPython looks for the git executable when first imported, so the
    import is deferred until git is actually needed.

    Raises:
        GitUnavailableError: GitPython or the git executable is missing
    """
    try:
        import git
    except ImportError as e:
        raise GitUnavailableError(f"Cannot run git: {e}") from e
    return git


def _repo_lock(working_tree: str) -> threading.Lock:
    with _REPO_LOCKS_GUARD:
        return _REPO_LOCKS.setdefault(working_tree, threading.Lock())


_C_ESCAPES = {
    "a": "\a", "b": "\b", "t": "\t", "n": "\n",
    "v": "\v", "f": "\f", "r": "\r", '"': '"', "\\": "\\",
}


def _unquote(path: str) -> str:
    """Decode a path git printed as a C-style quoted string."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    body = path[1:-1]
    decoded = bytearray()
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body):
            octal = body[index + 1:index + 4]
            if len(octal) == 3 and all(digit in "01234567" for digit in octal):
                decoded.append(int(octal, 8))
                index += 4
                continue
            escaped = body[index + 1]
            decoded.extend(_C_ESCAPES.get(escaped, escaped).encode("utf-8"))
            index += 2
            continue
        decoded.extend(char.encode("utf-8"))
        index += 1
    return decoded.decode("utf-8", errors="surrogateescape")


# ============================================================
# Data models
# ============================================================

@dataclass(frozen=True)
class BranchRef:
    """
    Local or remote-tracking branch

    Attributes:
        refname: Full reference name (refs/heads/x, refs/remotes/origin/x)
        commit: Commit the reference points to
        branch: Branch name without the remote part
        remote: Remote name, None for local branches
        symbolic: True for symbolic references such as origin/HEAD
    """
    refname: str
    commit: str
    branch: str
    remote: Optional[str] = None
    symbolic: bool = False

    @property
    def is_remote(self) -> bool:
        return self.remote is not None


# ============================================================
# Resolver
# ============================================================

class GitChangeResolver:
    """Query a git working tree for changed files."""

    def __init__(self, repo_root: Path | str):
        """
        Open the repository containing ``repo_root``.

        Raises:
            NotAGitRepositoryError: ``repo_root`` is not inside a working tree
            GitUnavailableError: The git executable cannot be run
        """
        self.repo_root = os.path.abspath(repo_root)
        self._git = git = load_git()
        try:
            self.repo = git.Repo(self.repo_root, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise NotAGitRepositoryError(self.repo_root) from e
        except git.GitCommandNotFound as e:
            raise GitUnavailableError(f"Cannot run git: {e}") from e

        if self.repo.bare or self.repo.working_tree_dir is None:
            raise NotAGitRepositoryError(self.repo_root)

        self.working_tree = os.path.realpath(self.repo.working_tree_dir)
        self._lock = _repo_lock(self.working_tree)

    def _run(self, command: str, *args: str, git_options: Optional[dict] = None, **kwargs) -> str:
        git_cmd = self.repo.git
        if git_options:
            git_cmd = git_cmd(**git_options)
        try:
            return getattr(git_cmd, command)(*args, **kwargs)
        except self._git.GitCommandNotFound as e:
            raise GitUnavailableError(f"Cannot run git: {e}") from e
        except self._git.GitCommandError as e:
            command_line = " ".join(str(part) for part in e.command)
            raise GitCommandFailedError(command_line, e.status, str(e.stderr or "")) from e

    def _absolute(self, relative_path: str) -> str:
        return os.path.normpath(os.path.join(self.working_tree, relative_path))

    def has_head(self) -> bool:
        """False on an unborn branch (no commit yet)."""
        return self.repo.head.is_valid()

    def head_commit(self) -> str:
        return self._run("rev_parse", "--verify", "HEAD^{commit}").strip()

    def resolve_revision(self, revision: str) -> str:
        """
        Commit id of a revision.

        Raises:
            AmbiguousGitStateError: git cannot resolve the revision to a commit
        """
        try:
            return self._run("rev_parse", "--verify", f"{revision}^{{commit}}").strip()
        except GitCommandFailedError as e:
            raise AmbiguousGitStateError(f"Cannot resolve commit {revision!r}: {e.stderr}") from e

    def list_branches(self) -> list[BranchRef]:
        """Local branches and remote-tracking branches of the repository."""
        remotes = sorted((remote.name for remote in self.repo.remotes), key=len, reverse=True)
        output = self._run("for_each_ref", f"--format={_REF_FORMAT}", _LOCAL_PREFIX, _REMOTE_PREFIX)

        branches: list[BranchRef] = []
        for line in output.splitlines():
            parts = line.split("\0")
            if len(parts) != 3:
                continue
            commit, symref, refname = parts
            if refname.startswith(_LOCAL_PREFIX):
                branches.append(BranchRef(refname, commit, refname[len(_LOCAL_PREFIX):], symbolic=bool(symref)))
                continue
            short = refname[len(_REMOTE_PREFIX):]
            remote = next((name for name in remotes if short.startswith(f"{name}/")), None)
            if remote is None:
                remote, _, branch = short.partition("/")
            else:
                branch = short[len(remote) + 1:]
            branches.append(BranchRef(refname, commit, branch, remote=remote, symbolic=bool(symref) or branch == "HEAD"))
        return branches

    def resolve_current_branch(self, options: Optional[GitFilterOptions] = None) -> str:
        """
        Name of the branch being built.

        The explicit option wins, then the branch HEAD points to. On a
        detached HEAD, the branch is inferred from the remote-tracking
        branches pointing at the HEAD commit.

        Raises:
            AmbiguousGitStateError: Detached HEAD matching no branch, or several
        """
        if options is not None and options.current_branch_name:
            return options.current_branch_name

        if not self.repo.head.is_detached:
            return self.repo.active_branch.name

        head = self.head_commit()
        candidates = sorted({
            ref.branch
            for ref in self.list_branches()
            if ref.is_remote and not ref.symbolic and ref.commit == head
        })
        if len(candidates) == 1:
            logger.debug(f"Detached HEAD {head[:10]} presumed on branch {candidates[0]}")
            return candidates[0]
        if not candidates:
            raise AmbiguousGitStateError(
                f"HEAD is detached at {head[:10]} and no remote branch points to it; "
                "set the current branch name explicitly"
            )
        raise AmbiguousGitStateError(
            f"HEAD is detached at {head[:10]} and matches several remote branches "
            f"({', '.join(candidates)}); set the current branch name explicitly"
        )

    def _latest_commits(self, commits: set[str]) -> list[str]:
        """Drop the commits that are ancestors of another one of the set."""
        latest = []
        for commit in commits:
            if not any(other != commit and self._is_ancestor(commit, other) for other in commits):
                latest.append(commit)
        return sorted(latest)

    def _is_ancestor(self, ancestor: str, descendant: str) -> bool:
        try:
            return self.repo.is_ancestor(ancestor, descendant)
        except self._git.GitCommandError as e:
            raise GitCommandFailedError(f"merge-base --is-ancestor {ancestor} {descendant}", e.status, str(e.stderr or "")) from e

    def _merge_base(self, first: str, second: str) -> Optional[str]:
        try:
            bases = self.repo.merge_base(first, second)
        except self._git.GitCommandError as e:
            raise GitCommandFailedError(f"merge-base {first} {second}", e.status, str(e.stderr or "")) from e
        return bases[0].hexsha if bases else None

    def resolve_branch_origin(
        self,
        options: Optional[GitFilterOptions] = None,
        current_branch: Optional[str] = None,
    ) -> list[str]:
        """
        Commits after which history is private to the current branch.

        Without an explicit origin commit, these are the most recent common
        ancestors of HEAD with every other branch (the remote-tracking
        branches of the current branch do not count), moved forward to the
        last merge commit of the current branch when it is more recent. An
        empty list means every commit of HEAD is private to the branch.

        Returns:
            Boundary commit ids, sorted
        """
        if options is not None and options.branch_origin_commit:
            return [self.resolve_revision(options.branch_origin_commit)]

        if current_branch is None:
            current_branch = self.resolve_current_branch(options)

        head = self.head_commit()
        boundaries: set[str] = set()
        for ref in self.list_branches():
            if ref.symbolic or ref.branch == current_branch:
                continue
            base = self._merge_base(head, ref.commit)
            if base is not None:
                boundaries.add(base)

        last_merge = self._run("rev_list", "--merges", "--first-parent", "-n", "1", "HEAD").strip()
        if last_merge:
            boundaries.add(last_merge)

        origin = self._latest_commits(boundaries)
        logger.debug(
            f"Branch {current_branch}: private history starts after "
            f"{', '.join(commit[:10] for commit in origin) or 'the root commit'}"
        )
        return origin

    def get_uncommitted_files(self) -> set[str]:
        """Staged, unstaged and untracked files (absolute paths)."""
        output = self._run(
            "status", "--porcelain", "-z", "--untracked-files=all",
            strip_newline_in_stdout=False,
        )
        paths: set[str] = set()
        entries = output.split("\0")
        index = 0
        while index < len(entries):
            entry = entries[index]
            index += 1
            if len(entry) < 4:
                continue
            code, path = entry[:2], entry[3:]
            paths.add(self._absolute(path))
            if "R" in code or "C" in code:
                # next entry is the source of the rename or copy
                index += 1
        return paths

    def get_branch_only_files(self, options: Optional[GitFilterOptions] = None) -> set[str]:
        """Files touched by the commits private to the current branch (absolute paths)."""
        if not self.has_head():
            return set()

        origin = self.resolve_branch_origin(options)
        output = self._run(
            "log", "--name-only", "--no-renames", "--pretty=format:", "HEAD", "--not", *origin,
            git_options={"c": "core.quotepath=off"},
        )
        return {
            self._absolute(_unquote(line))
            for line in output.splitlines()
            if line.strip()
        }

    def get_changed_files(self, options: GitFilterOptions) -> set[str]:
        """
        Files git reports as changed according to ``options``.

        Args:
            options: Which kinds of change to include

        Returns:
            Absolute paths (resolved working tree), may name deleted files

        Raises:
            VcsError: git cannot answer; nothing is guessed
        """
        changed: set[str] = set()
        if not options.include_uncommitted and not options.include_branch_only_commits:
            return changed

        with self._lock:
            if options.include_uncommitted:
                changed |= self.get_uncommitted_files()
            if options.include_branch_only_commits:
                changed |= self.get_branch_only_files(options)

        logger.debug(f"git reports {len(changed)} changed files in {self.working_tree}")
        return changed


def get_changed_files(repo_root: Path | str, options: GitFilterOptions) -> set[str]:
    return GitChangeResolver(repo_root).get_changed_files(options)
