"""Exception hierarchy for pathlister.

Configuration problems, filesystem problems and git problems each get their
own branch so callers can decide which of them are fatal for their build.
"""

from pathlib import Path
from typing import Optional


class PathListerError(Exception):
    """Base class for every error raised by pathlister."""
    pass


class FilterValidationError(PathListerError):
    """A filter pattern could not be compiled.

    Attributes:
        pattern: The offending pattern
        part_number: 1-based position of the pattern (globs first, then regexes)
    """

    def __init__(self, message: str, pattern: str = "", part_number: int = 0):
        self.pattern = pattern
        self.part_number = part_number
        if part_number:
            message = f"Error in filter part {part_number} ({pattern!r}): {message}"
        super().__init__(message)


class ListingIOError(PathListerError):
    """The listing root could not be read."""

    def __init__(self, path: Path | str, operation: str, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot {operation} {self.path}{detail}")


class VcsError(PathListerError):
    """Base class for version control errors."""
    pass


class GitUnavailableError(VcsError):
    """The git executable could not be found or started."""
    pass


class NotAGitRepositoryError(VcsError):
    """The directory is not inside a git working tree."""

    def __init__(self, path: Path | str):
        self.path = str(path)
        super().__init__(f"Not a git repository: {self.path}")


class GitCommandFailedError(VcsError):
    """A git command returned a non-zero status."""

    def __init__(self, command: str, status: Optional[int], stderr: str = ""):
        self.command = command
        self.status = status
        self.stderr = stderr.strip()
        message = f"git command failed ({status}): {command}"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)


class AmbiguousGitStateError(VcsError):
    """The branch or its divergence point cannot be determined without guessing."""
    pass
