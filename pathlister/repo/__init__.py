"""
Repository Layer

Git queries used to restrict listings to changed files.
"""

from pathlister.repo.resolver import (
    GitChangeResolver,
    BranchRef,
    get_changed_files,
)
from pathlister.repo.probe import probe_git, GitProbe, GitAvailability

__all__ = [
    # resolver
    "GitChangeResolver",
    "BranchRef",
    "get_changed_files",
    # probe
    "probe_git",
    "GitProbe",
    "GitAvailability",
]
