"""
pathlister - source change detection for incremental builds

Lists the files of a source directory through include/exclude filters,
optionally restricted to what git reports as changed, and classifies each
file against the previous build.
"""

__version__ = "0.3.0"

from pathlister.core import (
    FileState,
    FileRecord,
    FileList,
    FilterOptions,
    GitFilterOptions,
    OutputOptions,
    PathLister,
    classify,
    find_deleted,
    set_file_hash,
)
from pathlister.filters import FilterChain, compile_pattern
from pathlister.repo import GitChangeResolver, probe_git
from pathlister.errors import (
    PathListerError,
    FilterValidationError,
    ListingIOError,
    VcsError,
    GitUnavailableError,
    NotAGitRepositoryError,
    GitCommandFailedError,
    AmbiguousGitStateError,
)

__all__ = [
    "__version__",
    "FileState",
    "FileRecord",
    "FileList",
    "FilterOptions",
    "GitFilterOptions",
    "OutputOptions",
    "PathLister",
    "classify",
    "find_deleted",
    "set_file_hash",
    "FilterChain",
    "compile_pattern",
    "GitChangeResolver",
    "probe_git",
    "PathListerError",
    "FilterValidationError",
    "ListingIOError",
    "VcsError",
    "GitUnavailableError",
    "NotAGitRepositoryError",
    "GitCommandFailedError",
    "AmbiguousGitStateError",
]
