"""
Core Layer

Data models, options, walking, hashing, state classification and the
lister tying them together.
"""

from pathlister.core.models import FileState, FileRecord, FileList
from pathlister.core.options import (
    FilterOptions,
    GitFilterOptions,
    OutputOptions,
    PreviousImageLookup,
    split_patterns,
)
from pathlister.core.hashing import compute_checksum, compute_checksums, set_file_hash
from pathlister.core.differ import classify, diff_records, find_deleted
from pathlister.core.walker import DirectoryWalker, list_directories, list_files
from pathlister.core.lister import PathLister

__all__ = [
    # models
    "FileState",
    "FileRecord",
    "FileList",
    # options
    "FilterOptions",
    "GitFilterOptions",
    "OutputOptions",
    "PreviousImageLookup",
    "split_patterns",
    # hashing
    "compute_checksum",
    "compute_checksums",
    "set_file_hash",
    # differ
    "classify",
    "diff_records",
    "find_deleted",
    # walker
    "DirectoryWalker",
    "list_directories",
    "list_files",
    # lister
    "PathLister",
]
