"""Listing options.

Plain configuration records read by the lister; behaviour is driven by
their flags only.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from pathlister.core.models import FileRecord


# A pattern field accepts a ";"-separated string or a sequence of patterns
PatternInput = Union[str, Sequence[str], None]

# Previous image of a path, None when the path was not part of the last build
PreviousImageLookup = Callable[[str], Optional[FileRecord]]

PATTERN_SEPARATOR = ";"

DEFAULT_HASH_WORKERS = 4


def split_patterns(value: PatternInput) -> list[str]:
    """Turn a pattern field into a list of non-empty patterns."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    items = [part for item in value if item for part in item.split(PATTERN_SEPARATOR)]
    return [item.strip() for item in items if item.strip()]


@dataclass
class FilterOptions:
    """
    Path filtering options.

    Attributes:
        include: Glob patterns, a path must match one of them (or an include regex)
        exclude: Glob patterns rejecting the paths they match
        include_regex: Regular expressions, same role as ``include``
        exclude_regex: Regular expressions, same role as ``exclude``
        extra_vcs_pattern_exclusion: None for the built-in VCS exclusion,
            "" to disable it, otherwise the patterns replacing it
        override_output_list: Explicit paths returned instead of walking the root
        exclude_hidden_directories: Reject paths inside hidden directories
        recursive_listing: Walk sub directories
    """
    include: PatternInput = None
    exclude: PatternInput = None
    include_regex: PatternInput = None
    exclude_regex: PatternInput = None
    extra_vcs_pattern_exclusion: PatternInput = None
    override_output_list: PatternInput = None
    exclude_hidden_directories: bool = False
    recursive_listing: bool = True


@dataclass
class GitFilterOptions:
    """
    Restrict listed files to those git reports as changed.

    Attributes:
        include_uncommitted: Files modified in the working tree or index, and untracked files
        include_branch_only_commits: Files touched by commits not yet on any other branch
        current_branch_name: Branch to assume instead of reading HEAD
        branch_origin_commit: Last commit shared with other branches; "HEAD" means none
    """
    include_uncommitted: bool = False
    include_branch_only_commits: bool = False
    current_branch_name: Optional[str] = None
    branch_origin_commit: Optional[str] = None


@dataclass
class OutputOptions:
    """Comparison of listed files with their previous image."""
    use_last_write_date_comparison: bool = False
    use_checksum_comparison: bool = False
    previous_image: Optional[PreviousImageLookup] = None
    hash_workers: int = DEFAULT_HASH_WORKERS
