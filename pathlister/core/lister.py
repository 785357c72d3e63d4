"""
Path lister

Entry point of the change detection engine. Listing files goes through:

1. walk the root (or take the override list) and apply the filter chain
2. restrict to the files git reports as changed, when git filtering is set
3. read size and last write time, hash the content when needed
4. classify every file against its previous image
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from pathlister.core.differ import diff_records
from pathlister.core.hashing import compute_checksums
from pathlister.core.models import FileList, FileRecord
from pathlister.core.options import FilterOptions, GitFilterOptions, OutputOptions
from pathlister.core.walker import DirectoryWalker, ErrorCallback
from pathlister.filters.chain import FilterChain

logger = logging.getLogger(__name__)


def _real_parent_path(path: str) -> str:
    """Resolve symbolic links in the parent directories of ``path`` only."""
    directory, name = os.path.split(path)
    return os.path.join(os.path.realpath(directory), name)


class PathLister:
    """
    List the directories or files of a source directory.

    The options are plain attributes and can be changed between two listings.

    Attributes:
        root: Directory to list
        filter_options: Path filters, None applies the VCS exclusion only
        git_filter: Git based restriction of the listed files, None disables it
        output_options: Comparison with the previous build
        on_error: Called for each entry that cannot be read (default: log a warning)
        errors: Entries that could not be read during the last listing
    """

    def __init__(
        self,
        root: Path | str,
        filter_options: Optional[FilterOptions] = None,
        git_filter: Optional[GitFilterOptions] = None,
        output_options: Optional[OutputOptions] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.root = os.path.abspath(root)
        self.filter_options = filter_options
        self.git_filter = git_filter
        self.output_options = output_options
        self.on_error = on_error
        self.errors: list[tuple[str, OSError]] = []

    def _report(self, path: str, error: OSError) -> None:
        self.errors.append((path, error))
        if self.on_error is not None:
            self.on_error(path, error)
        else:
            logger.warning(f"Skipping {path}: {error}")

    def _filter_chain(self) -> FilterChain:
        return FilterChain(self.root, self.filter_options)

    def _recursive(self) -> bool:
        return self.filter_options is None or self.filter_options.recursive_listing

    def _override_paths(self, chain: FilterChain, directories: bool) -> list[str]:
        kept = []
        for path in chain.override_paths or []:
            exists = os.path.isdir(path) if directories else os.path.isfile(path)
            if exists and chain.accepts(path, directories):
                kept.append(path)
        logger.debug(f"Using the override list: {len(kept)} of {len(chain.override_paths or [])} paths exist")
        return kept

    def _walk(self, chain: FilterChain, directories: bool) -> list[str]:
        if chain.override_paths is not None:
            return self._override_paths(chain, directories)

        walker = DirectoryWalker(self.root, chain, self._recursive(), on_error=self._report)
        if directories:
            paths = walker.list_directories()
        else:
            paths = walker.list_files()
        return paths

    def get_directory_list(self) -> list[str]:
        """
        Directories below the root accepted by the filters, sorted.

        Raises:
            FilterValidationError: A filter pattern is invalid
            ListingIOError: The root cannot be read
        """
        self.errors = []
        chain = self._filter_chain()
        return self._walk(chain, directories=True)

    def _git_changed(self, paths: list[str]) -> list[str]:
        from pathlister.repo.resolver import GitChangeResolver

        resolver = GitChangeResolver(self.root)
        changed = resolver.get_changed_files(self.git_filter)
        return [path for path in paths if _real_parent_path(path) in changed]

    def _stat_records(self, paths: list[str]) -> list[FileRecord]:
        records = []
        for path in paths:
            try:
                stat_result = os.stat(path)
            except OSError as e:
                self._report(path, e)
                continue
            records.append(FileRecord(path=path, size=stat_result.st_size, last_write_time=stat_result.st_mtime))
        return records

    def get_file_list(self) -> FileList:
        """
        Files accepted by the filters (and git, when set), with their state.

        Raises:
            FilterValidationError: A filter pattern is invalid
            ListingIOError: The root cannot be read
            VcsError: Git filtering is set and git cannot answer
        """
        self.errors = []
        chain = self._filter_chain()
        paths = self._walk(chain, directories=False)

        if self.git_filter is not None:
            paths = self._git_changed(paths)

        records = self._stat_records(paths)

        output = self.output_options or OutputOptions()
        if output.use_checksum_comparison and records:
            checksums = compute_checksums(
                (record.path for record in records),
                workers=output.hash_workers,
                on_error=self._report,
            )
            records = [record.with_checksum(checksums.get(record.path)) for record in records]

        file_list = diff_records(records, output.previous_image, output)
        logger.debug(f"Listed {len(file_list)} files in {self.root}")
        return file_list

    def filter_source_files(self, files: Iterable) -> list:
        """
        Apply the filters to paths or file records without walking the disk.

        Relative paths are taken relative to the root.
        """
        return self._filter_chain().filter_paths(files)

