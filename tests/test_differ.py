"""Tests for file state classification and checksums."""

from __future__ import annotations

import hashlib
import tempfile
import unittest
from pathlib import Path

from pathlister.core.differ import classify, diff_records, find_deleted
from pathlister.core.hashing import compute_checksum, compute_checksums, set_file_hash
from pathlister.core.models import FileList, FileRecord, FileState
from pathlister.core.options import OutputOptions


class ClassifyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.previous = FileRecord("/src/a.p", size=10, last_write_time=100.0, checksum="abc")

    def test_missing_previous_is_added(self) -> None:
        self.assertEqual(classify(self.previous, None), FileState.ADDED)

    def test_size_is_always_compared(self) -> None:
        current = FileRecord("/src/a.p", size=11, last_write_time=100.0)
        self.assertEqual(classify(current, self.previous, OutputOptions()), FileState.MODIFIED)

    def test_date_only_compared_when_enabled(self) -> None:
        current = FileRecord("/src/a.p", size=10, last_write_time=200.0)
        self.assertEqual(classify(current, self.previous, OutputOptions()), FileState.UNCHANGED)
        self.assertEqual(
            classify(current, self.previous, OutputOptions(use_last_write_date_comparison=True)),
            FileState.MODIFIED,
        )

    def test_checksum_comparison(self) -> None:
        options = OutputOptions(use_checksum_comparison=True)
        same = FileRecord("/src/a.p", size=10, last_write_time=100.0, checksum="abc")
        other = FileRecord("/src/a.p", size=10, last_write_time=100.0, checksum="def")
        self.assertEqual(classify(same, self.previous, options), FileState.UNCHANGED)
        self.assertEqual(classify(other, self.previous, options), FileState.MODIFIED)

    def test_unknown_previous_checksum_is_modified(self) -> None:
        previous = FileRecord("/src/a.p", size=10, last_write_time=100.0)
        current = FileRecord("/src/a.p", size=10, last_write_time=100.0, checksum="abc")
        options = OutputOptions(use_checksum_comparison=True)
        self.assertEqual(classify(current, previous, options), FileState.MODIFIED)


class DiffRecordsTests(unittest.TestCase):
    def test_previous_records_are_left_untouched(self) -> None:
        previous = FileList([FileRecord("/src/a.p", size=1), FileRecord("/src/b.p", size=2)])
        current = [FileRecord("/src/a.p", size=1), FileRecord("/src/c.p", size=3)]

        result = diff_records(current, previous.get)

        self.assertEqual(result["/src/a.p"].state, FileState.UNCHANGED)
        self.assertEqual(result["/src/c.p"].state, FileState.ADDED)
        self.assertTrue(all(record.state == FileState.ADDED for record in previous))

    def test_no_lookup_means_everything_added(self) -> None:
        result = diff_records([FileRecord("/src/a.p")], None)
        self.assertEqual(result.count(FileState.ADDED), 1)

    def test_find_deleted(self) -> None:
        previous = FileList([FileRecord("/src/b.p"), FileRecord("/src/a.p"), FileRecord("/src/c.p")])
        current = FileList([FileRecord("/src/b.p")])

        deleted = find_deleted(previous, current)

        self.assertEqual([record.path for record in deleted], ["/src/a.p", "/src/c.p"])
        self.assertTrue(all(record.state == FileState.DELETED for record in deleted))


class ChecksumTests(unittest.TestCase):
    def test_checksum_is_md5_of_content(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp).resolve() / "a.p"
            path.write_bytes(b"DISPLAY 'hello'.")
            self.assertEqual(compute_checksum(path), hashlib.md5(b"DISPLAY 'hello'.").hexdigest())

            record = set_file_hash(FileRecord(str(path), size=16))
            self.assertEqual(record.checksum, hashlib.md5(b"DISPLAY 'hello'.").hexdigest())
            self.assertEqual(record.size, 16)

    def test_parallel_hashing_matches_sequential(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            paths = []
            for index in range(12):
                path = root / f"file{index}.p"
                path.write_text(f"content {index}" * (index + 1), encoding="utf-8")
                paths.append(str(path))

            sequential = compute_checksums(paths, workers=1)
            parallel = compute_checksums(reversed(paths), workers=4)

            self.assertEqual(sequential, parallel)
            self.assertEqual(len(parallel), 12)

    def test_unreadable_files_are_reported(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            present = root / "present.p"
            present.write_text("x", encoding="utf-8")
            missing = root / "missing.p"
            reported: list[str] = []

            checksums = compute_checksums(
                [str(present), str(missing)],
                workers=2,
                on_error=lambda path, error: reported.append(path),
            )

            self.assertEqual(list(checksums), [str(present)])
            self.assertEqual(reported, [str(missing)])


class FileListTests(unittest.TestCase):
    def test_unique_sorted_by_path(self) -> None:
        file_list = FileList([
            FileRecord("/src/b.p", size=1),
            FileRecord("/src/a.p", size=1),
            FileRecord("/src/b.p", size=2),
        ])
        self.assertEqual(file_list.paths(), ["/src/a.p", "/src/b.p"])
        self.assertEqual(file_list["/src/b.p"].size, 2)
        self.assertEqual(file_list[0].path, "/src/a.p")
        self.assertIn("/src/a.p", file_list)
        self.assertIsNone(file_list.get("/src/c.p"))

    def test_json_keeps_states_and_checksums(self) -> None:
        file_list = FileList([
            FileRecord("/src/a.p", size=3, last_write_time=1.5, checksum="abc", state=FileState.MODIFIED),
            FileRecord("/src/b.p"),
        ])
        restored = FileList.from_json(file_list.to_json())
        self.assertEqual(restored, file_list)
        self.assertEqual(restored["/src/a.p"].state, FileState.MODIFIED)


if __name__ == "__main__":
    unittest.main()
