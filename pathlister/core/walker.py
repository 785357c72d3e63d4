"""Directory walker.

Enumerates the directories and files below a root and keeps the ones the
filter chain accepts. Every directory is descended into, whether or not the
chain accepts it, so nested paths matched by their own patterns are never
missed. Symbolic links to directories are not followed.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Iterator, Optional, Protocol

from pathlister.errors import ListingIOError

logger = logging.getLogger(__name__)

# Called with the path that could not be read and the error raised
ErrorCallback = Callable[[str, OSError], None]


class PathFilter(Protocol):
    def accepts(self, candidate_path: str, is_directory: bool = False) -> bool:
        ...


class DirectoryWalker:
    """Depth-first walk below a root directory."""

    def __init__(
        self,
        root: Path | str,
        path_filter: Optional[PathFilter] = None,
        recursive: bool = True,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.root = os.path.abspath(root)
        self.path_filter = path_filter
        self.recursive = recursive
        self.on_error = on_error
        self.errors: list[tuple[str, OSError]] = []

    def _report(self, path: str, error: OSError) -> None:
        self.errors.append((path, error))
        if self.on_error is not None:
            self.on_error(path, error)
        else:
            logger.warning(f"Skipping {path}: {error}")

    def _scan(self, directory: str, is_root: bool = False) -> Iterator[tuple[str, bool]]:
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as e:
            if is_root:
                raise ListingIOError(directory, "read directory", e) from e
            self._report(directory, e)
            return

        for entry in entries:
            try:
                is_directory = entry.is_dir(follow_symlinks=False)
                is_file = not is_directory and entry.is_file()
            except OSError as e:
                self._report(entry.path, e)
                continue

            if is_directory:
                yield entry.path, True
                if self.recursive:
                    yield from self._scan(entry.path)
            elif is_file:
                yield entry.path, False

    def walk(self) -> Iterator[tuple[str, bool]]:
        """
        Yield ``(path, is_directory)`` for every entry below the root.

        Raises:
            ListingIOError: The root does not exist or cannot be read
        """
        self.errors = []
        if not os.path.isdir(self.root):
            raise ListingIOError(self.root, "list directory", FileNotFoundError(self.root))
        yield from self._scan(self.root, is_root=True)

    def _accepted(self, want_directories: bool) -> list[str]:
        paths = []
        for path, is_directory in self.walk():
            if is_directory != want_directories:
                continue
            if self.path_filter is None or self.path_filter.accepts(path, is_directory):
                paths.append(path)
        return sorted(paths)

    def list_directories(self) -> list[str]:
        """Accepted directories, sorted by path. The root is never included."""
        return self._accepted(want_directories=True)

    def list_files(self) -> list[str]:
        """Accepted files, sorted by path."""
        return self._accepted(want_directories=False)


def list_directories(
    root: Path | str,
    path_filter: Optional[PathFilter] = None,
    recursive: bool = True,
    on_error: Optional[ErrorCallback] = None,
) -> list[str]:
    return DirectoryWalker(root, path_filter, recursive, on_error).list_directories()


def list_files(
    root: Path | str,
    path_filter: Optional[PathFilter] = None,
    recursive: bool = True,
    on_error: Optional[ErrorCallback] = None,
) -> list[str]:
    return DirectoryWalker(root, path_filter, recursive, on_error).list_files()
