"""Version control metadata exclusion.

Uses the pathspec library (gitignore syntax) to recognize the metadata
directories of common version control systems and everything below them.
"""

import pathspec

from pathlister.core.options import PatternInput, split_patterns
from pathlister.filters.patterns import normalize_relative_path


# Metadata directories excluded unless the caller disables VCS exclusion
DEFAULT_VCS_PATTERNS: list[str] = [
    ".git/",
    ".svn/",
    ".hg/",
    ".bzr/",
    "CVS/",
    "_darcs/",
]


class VcsFilter:
    """Path filter rejecting version control metadata."""

    def __init__(self, patterns: list[str] | None = None):
        """
        Initialize the filter.

        Args:
            patterns: gitignore style patterns, defaults to DEFAULT_VCS_PATTERNS
        """
        self.patterns = list(DEFAULT_VCS_PATTERNS if patterns is None else patterns)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self.patterns)

    @classmethod
    def from_option(cls, value: PatternInput) -> "VcsFilter | None":
        """
        Build the filter described by ``FilterOptions.extra_vcs_pattern_exclusion``.

        None keeps the defaults, an empty value disables the exclusion.
        """
        if value is None:
            return cls()
        patterns = split_patterns(value)
        if not patterns:
            return None
        return cls(patterns)

    def should_exclude(self, relative_path: str, is_directory: bool = False) -> bool:
        """Check if a path (relative to the listing root) is VCS metadata."""
        path = normalize_relative_path(relative_path).rstrip("/")
        if not path:
            return False
        if is_directory:
            path += "/"
        return self._spec.match_file(path)

    def get_patterns(self) -> list[str]:
        return list(self.patterns)
