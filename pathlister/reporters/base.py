"""
Reporter interface and the listing result it renders
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from pathlister.core.models import FileList, FileRecord, FileState


@dataclass
class ListingResult:
    """
    Outcome of a command line listing

    Attributes:
        root: Listed directory
        files: Listed files, None for a directory listing
        directories: Listed directories, None for a file listing
        deleted: Files of the previous snapshot missing from the listing
        errors: (path, message) of the entries that could not be read
    """
    root: str
    files: Optional[FileList] = None
    directories: Optional[list[str]] = None
    deleted: list[FileRecord] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def stats(self) -> dict[str, int]:
        if self.files is None:
            return {"directories": len(self.directories or []), "errors": len(self.errors)}
        return {
            "files": len(self.files),
            "added": self.files.count(FileState.ADDED),
            "modified": self.files.count(FileState.MODIFIED),
            "unchanged": self.files.count(FileState.UNCHANGED),
            "deleted": len(self.deleted),
            "errors": len(self.errors),
        }


class Reporter(Protocol):
    """Reporter protocol"""

    def report(self, result: ListingResult) -> None:
        """Render the result"""
        ...
