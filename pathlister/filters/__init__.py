"""Path filtering for pathlister.

This module provides glob/regex matchers, pathspec-based version control
exclusion and the filter chain combining them.
"""

from pathlister.filters.patterns import (
    PatternMatcher,
    compile_pattern,
    glob_to_regex,
    normalize_relative_path,
)
from pathlister.filters.vcs import (
    VcsFilter,
    DEFAULT_VCS_PATTERNS,
)
from pathlister.filters.chain import FilterChain, is_hidden

__all__ = [
    "PatternMatcher",
    "compile_pattern",
    "glob_to_regex",
    "normalize_relative_path",
    "VcsFilter",
    "DEFAULT_VCS_PATTERNS",
    "FilterChain",
    "is_hidden",
]
