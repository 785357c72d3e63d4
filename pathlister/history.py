"""Build history files used by the command line.

The engine only reads previous images through a lookup function; this module
is the command line's own way of keeping them between two runs.
"""

import logging
from pathlib import Path

from pathlister.core.models import FileList
from pathlister.errors import ListingIOError

logger = logging.getLogger(__name__)


def load_snapshot(path: Path) -> FileList:
    """
    Read the file list saved by a previous run.

    A missing file is an empty history (first build).

    Raises:
        ListingIOError: The file exists but cannot be read or parsed
    """
    if not path.exists():
        logger.debug(f"No previous snapshot at {path}")
        return FileList()
    try:
        return FileList.from_json(path.read_text(encoding="utf-8"))
    except (OSError, ValueError, TypeError, KeyError) as e:
        raise ListingIOError(path, "read snapshot", e) from e


def save_snapshot(file_list: FileList, path: Path) -> None:
    """Write the file list for the next run."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(file_list.to_json(), encoding="utf-8")
    except OSError as e:
        raise ListingIOError(path, "write snapshot", e) from e
    logger.debug(f"Saved {len(file_list)} file images to {path}")
