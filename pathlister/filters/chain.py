"""Filter chain: single accept/reject decision for a candidate path.

Rules are evaluated in this order, the first decisive one wins:

1. override list (only listed paths that exist on disk are accepted)
2. version control metadata exclusion
3. hidden directory exclusion
4. include patterns (globs and regexes, at least one must match)
5. exclude patterns (globs and regexes, any match rejects)
"""

import logging
import os
import stat
import sys
from pathlib import Path
from typing import Iterable, Optional, TypeVar

from pathlister.core.models import FileRecord
from pathlister.core.options import FilterOptions, split_patterns
from pathlister.errors import FilterValidationError
from pathlister.filters.patterns import PatternMatcher, compile_pattern
from pathlister.filters.vcs import VcsFilter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_hidden(path: str) -> bool:
    """Check if the OS flags a file or directory as hidden."""
    if sys.platform == "win32":
        try:
            attributes = os.stat(path, follow_symlinks=False).st_file_attributes
        except OSError:
            return False
        return bool(attributes & stat.FILE_ATTRIBUTE_HIDDEN)

    if os.path.basename(path).startswith("."):
        return True

    if sys.platform == "darwin":
        try:
            flags = os.stat(path, follow_symlinks=False).st_flags
        except OSError:
            return False
        return bool(flags & stat.UF_HIDDEN)

    return False


def _compile_collection(name: str, globs: list[str], regexes: list[str]) -> list[PatternMatcher]:
    matchers: list[PatternMatcher] = []
    sources = [(pattern, False) for pattern in globs] + [(pattern, True) for pattern in regexes]
    for part_number, (pattern, is_regex) in enumerate(sources, start=1):
        try:
            matchers.append(compile_pattern(pattern, is_regex=is_regex))
        except FilterValidationError as e:
            raise FilterValidationError(
                f"invalid {name} {'regex' if is_regex else 'pattern'}: {e}",
                pattern=pattern,
                part_number=part_number,
            ) from e
    return matchers


class FilterChain:
    """Accept or reject paths found under a root directory."""

    def __init__(self, root: Path | str, options: Optional[FilterOptions] = None):
        """
        Compile the filter options.

        Args:
            root: Directory the listed paths are relative to
            options: Filter options, None applies the VCS exclusion only

        Raises:
            FilterValidationError: A pattern cannot be compiled
        """
        self.root = os.path.abspath(root)
        self.options = options or FilterOptions()

        self._override: Optional[frozenset[str]] = None
        override_paths = split_patterns(self.options.override_output_list)
        if override_paths:
            self._override = frozenset(self._absolute(path) for path in override_paths)
            if self._has_pattern_options():
                logger.debug("Override list set, ignoring the other filter options")

        self.vcs_filter = VcsFilter.from_option(self.options.extra_vcs_pattern_exclusion)
        self._includes = _compile_collection(
            "include",
            split_patterns(self.options.include),
            split_patterns(self.options.include_regex),
        )
        self._excludes = _compile_collection(
            "exclude",
            split_patterns(self.options.exclude),
            split_patterns(self.options.exclude_regex),
        )

    @property
    def override_paths(self) -> Optional[list[str]]:
        """Sorted override list, None when no override list is configured."""
        if self._override is None:
            return None
        return sorted(self._override)

    def _has_pattern_options(self) -> bool:
        return any(
            split_patterns(value)
            for value in (
                self.options.include,
                self.options.exclude,
                self.options.include_regex,
                self.options.exclude_regex,
            )
        ) or self.options.exclude_hidden_directories

    def _absolute(self, path: str) -> str:
        return os.path.normpath(os.path.join(self.root, path))

    def _relative(self, absolute_path: str) -> str:
        return os.path.relpath(absolute_path, self.root).replace(os.sep, "/")

    def _in_hidden_directory(self, relative: str, is_directory: bool) -> bool:
        segments = relative.split("/")
        if not is_directory:
            segments = segments[:-1]
        current = self.root
        for segment in segments:
            if segment in ("", ".", ".."):
                continue
            current = os.path.join(current, segment)
            if is_hidden(current):
                return True
        return False

    def accepts(self, candidate_path: Path | str, is_directory: bool = False) -> bool:
        """
        Decide whether a path is part of the listing.

        Args:
            candidate_path: Absolute path, or path relative to the root
            is_directory: True when the candidate is a directory

        Returns:
            True if the path passes every configured rule
        """
        absolute_path = self._absolute(str(candidate_path))

        if self._override is not None:
            return absolute_path in self._override and os.path.exists(absolute_path)

        relative = self._relative(absolute_path)

        if self.vcs_filter is not None and self.vcs_filter.should_exclude(relative, is_directory):
            return False

        if self.options.exclude_hidden_directories and self._in_hidden_directory(relative, is_directory):
            return False

        if self._includes and not any(matcher.matches(relative) for matcher in self._includes):
            return False

        if any(matcher.matches(relative) for matcher in self._excludes):
            return False

        return True

    def filter_paths(self, paths: Iterable[T]) -> list[T]:
        """Keep the paths (or file records) accepted by the chain, without walking the disk."""
        kept = []
        for item in paths:
            path = item.path if isinstance(item, FileRecord) else str(item)
            if self.accepts(path):
                kept.append(item)
        return kept
