"""Content checksums."""

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Optional

from pathlister.core.models import FileRecord

logger = logging.getLogger(__name__)

HASH_CHUNK_SIZE = 65536


def compute_checksum(path: Path | str) -> str:
    """MD5 of a file content, as a hex string."""
    digest = hashlib.md5()
    with open(path, "rb") as handle:
        while True:
            chunk = handle.read(HASH_CHUNK_SIZE)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def set_file_hash(record: FileRecord) -> FileRecord:
    """Return a copy of ``record`` carrying the checksum of its current content."""
    return record.with_checksum(compute_checksum(record.path))


def compute_checksums(
    paths: Iterable[str],
    workers: int = 1,
    on_error: Optional[Callable[[str, OSError], None]] = None,
) -> dict[str, str]:
    """
    Hash several files, in parallel when ``workers`` > 1.

    Each path is hashed once. Files that cannot be read are reported to
    ``on_error`` (or logged) and left out of the result.

    Args:
        paths: Files to hash
        workers: Number of hashing threads
        on_error: Called with the path and the error for unreadable files

    Returns:
        Mapping of path to checksum
    """
    unique_paths = sorted(set(paths))
    checksums: dict[str, str] = {}

    def hash_one(path: str) -> Optional[str]:
        try:
            return compute_checksum(path)
        except OSError as e:
            if on_error is not None:
                on_error(path, e)
            else:
                logger.warning(f"Cannot hash {path}: {e}")
            return None

    if workers <= 1 or len(unique_paths) <= 1:
        results = [hash_one(path) for path in unique_paths]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pathlister-hash") as executor:
            results = list(executor.map(hash_one, unique_paths))

    for path, checksum in zip(unique_paths, results):
        if checksum is not None:
            checksums[path] = checksum

    logger.debug(f"Hashed {len(checksums)} of {len(unique_paths)} files")
    return checksums
