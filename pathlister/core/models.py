"""
Data models

File records produced by a listing and the path-indexed list holding them.
"""

import json
from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Iterable, Iterator, Optional


class FileState(str, Enum):
    """State of a file compared to the previous build."""
    ADDED = "added"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"
    DELETED = "deleted"


@dataclass(frozen=True)
class FileRecord:
    """
    Image of a file on disk at listing time

    Attributes:
        path: Absolute path of the file
        size: Size in bytes
        last_write_time: Last modification time (POSIX timestamp)
        checksum: MD5 of the content, None when not computed
        state: State compared to the previous image of the same path
    """
    path: str
    size: int = 0
    last_write_time: float = 0.0
    checksum: Optional[str] = None
    state: FileState = FileState.ADDED

    def with_state(self, state: FileState) -> "FileRecord":
        return replace(self, state=state)

    def with_checksum(self, checksum: Optional[str]) -> "FileRecord":
        return replace(self, checksum=checksum)


class FileList:
    """
    Ordered collection of file records, unique by path

    Records are kept sorted by path. Adding a record for a path already
    present replaces the previous one.
    """

    def __init__(self, records: Iterable[FileRecord] = ()):
        by_path: dict[str, FileRecord] = {}
        for record in records:
            by_path[record.path] = record
        self._records = {path: by_path[path] for path in sorted(by_path)}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self._records.values())

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __getitem__(self, key: str | int) -> FileRecord:
        if isinstance(key, int):
            return list(self._records.values())[key]
        return self._records[key]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileList):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"FileList({len(self)} files)"

    def get(self, path: str) -> Optional[FileRecord]:
        """Return the record of ``path`` or None; usable as a previous-image lookup."""
        return self._records.get(path)

    def paths(self) -> list[str]:
        return list(self._records)

    def count(self, state: FileState) -> int:
        return sum(1 for record in self if record.state == state)

    def to_json(self) -> str:
        """Serialize to a JSON string."""
        data = {
            "files": [
                {**asdict(record), "state": record.state.value}
                for record in self
            ],
        }
        return json.dumps(data, ensure_ascii=False, indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "FileList":
        """Deserialize from a JSON string."""
        data = json.loads(json_str)
        records = []
        for item in data.get("files", []):
            item = dict(item)
            item["state"] = FileState(item.get("state", FileState.ADDED.value))
            records.append(FileRecord(**item))
        return cls(records)
