"""Glob and regex path matchers.

Both kinds of pattern are compiled once into a regular expression and matched
against paths relative to the listing root, written with forward slashes.

Glob rules:
- ``*`` and ``**`` match any run of characters, path separators included
- ``**/`` may also match nothing, so ``**/name`` matches ``name`` at the root
- ``?`` matches exactly one character
- every other character is literal, regex metacharacters included
- ``\\`` and ``/`` are both path separators
"""

import re
import sys
from dataclasses import dataclass, field

from pathlister.errors import FilterValidationError


# Default case sensitivity of the host filesystem
CASE_INSENSITIVE_FS: bool = sys.platform in ("win32", "cygwin", "darwin")


def normalize_relative_path(path: str) -> str:
    """Write a relative path with forward slashes and no leading "./"."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def glob_to_regex(pattern: str) -> str:
    """
    Translate a glob into an (unanchored) regular expression.

    Args:
        pattern: Glob pattern, any separator style

    Returns:
        Regular expression source, to be used with ``fullmatch``
    """
    pattern = pattern.replace("\\", "/")
    parts: list[str] = []
    i = 0
    length = len(pattern)

    while i < length:
        char = pattern[i]
        if char == "*":
            end = i
            while end < length and pattern[end] == "*":
                end += 1
            if end - i >= 2 and end < length and pattern[end] == "/":
                parts.append("(?:.*/)?")
                end += 1
            else:
                parts.append(".*")
            i = end
        elif char == "?":
            parts.append(".")
            i += 1
        else:
            parts.append(re.escape(char))
            i += 1

    return "".join(parts)


@dataclass(frozen=True)
class PatternMatcher:
    """
    A compiled glob or regex, reusable across any number of paths.

    Attributes:
        pattern: Source pattern as given by the user
        is_regex: True when ``pattern`` is a regular expression
    """
    pattern: str
    is_regex: bool = False
    case_sensitive: bool = not CASE_INSENSITIVE_FS
    _compiled: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        flags = re.DOTALL
        if not self.case_sensitive:
            flags |= re.IGNORECASE
        source = self.pattern if self.is_regex else glob_to_regex(self.pattern)
        try:
            compiled = re.compile(source, flags)
        except re.error as e:
            raise FilterValidationError(str(e), pattern=self.pattern) from e
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, relative_path: str) -> bool:
        """Check whether the relative path matches."""
        path = normalize_relative_path(relative_path)
        if self.is_regex:
            return self._compiled.search(path) is not None
        return self._compiled.fullmatch(path) is not None


def compile_pattern(pattern: str, is_regex: bool = False) -> PatternMatcher:
    """Compile a glob (or, with ``is_regex``, a regular expression) into a matcher."""
    if not pattern:
        raise FilterValidationError("empty pattern", pattern=pattern)
    return PatternMatcher(pattern, is_regex=is_regex)
