"""Snapshot differ.

Classifies files against their image from the previous build. Criteria, in
order:

1. no previous image: added
2. different size: modified (always checked)
3. different last write time: modified (when date comparison is enabled)
4. previous checksum missing or different: modified (when checksum comparison is enabled)
5. otherwise unchanged

Previous records are never modified; deleted files are not detected here,
see ``find_deleted``.
"""

from typing import Iterable, Optional

from pathlister.core.models import FileList, FileRecord, FileState
from pathlister.core.options import OutputOptions, PreviousImageLookup


def classify(
    current: FileRecord,
    previous: Optional[FileRecord],
    options: Optional[OutputOptions] = None,
) -> FileState:
    """
    State of a file compared to its previous image.

    Args:
        current: Image of the file now (with its checksum when checksum comparison is on)
        previous: Image of the file at the previous build, None if it was not there
        options: Enabled comparisons

    Returns:
        The file state
    """
    if previous is None:
        return FileState.ADDED

    if current.size != previous.size:
        return FileState.MODIFIED

    options = options or OutputOptions()

    if options.use_last_write_date_comparison and current.last_write_time != previous.last_write_time:
        return FileState.MODIFIED

    if options.use_checksum_comparison:
        # an unknown checksum cannot be proven equal
        if previous.checksum is None or current.checksum != previous.checksum:
            return FileState.MODIFIED

    return FileState.UNCHANGED


def diff_records(
    records: Iterable[FileRecord],
    previous_image: Optional[PreviousImageLookup],
    options: Optional[OutputOptions] = None,
) -> FileList:
    """Fresh records carrying their state; the lookup may be None (everything added)."""
    classified = []
    for record in records:
        previous = previous_image(record.path) if previous_image is not None else None
        classified.append(record.with_state(classify(record, previous, options)))
    return FileList(classified)


def find_deleted(previous: Iterable[FileRecord], current: FileList) -> list[FileRecord]:
    """Records of the previous build whose path is not in ``current``, flagged deleted."""
    return [
        record.with_state(FileState.DELETED)
        for record in sorted(previous, key=lambda record: record.path)
        if record.path not in current
    ]
