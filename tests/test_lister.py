"""End-to-end listing tests: filters, file states and directory listings."""

from __future__ import annotations

import os
import sys
import tempfile
import time
import unittest
from pathlib import Path

from pathlister.core.hashing import set_file_hash
from pathlister.core.lister import PathLister
from pathlister.core.models import FileList, FileState
from pathlister.core.options import FilterOptions, OutputOptions
from pathlister.errors import FilterValidationError, ListingIOError


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _states(file_list: FileList) -> dict[FileState, int]:
    return {state: file_list.count(state) for state in FileState if file_list.count(state)}


class FileStateTests(unittest.TestCase):
    def test_deleted_and_recreated_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root / "file1")
            _write(root / "sub" / "file2")
            _write(root / "sub" / "file3")
            _write(root / "file4")

            lister = PathLister(root, output_options=OutputOptions(use_last_write_date_comparison=True))

            list1 = lister.get_file_list()
            self.assertEqual(_states(list1), {FileState.ADDED: 4})

            lister.output_options.previous_image = list1.get
            (root / "file4").unlink()
            _write(root / "sub" / "file2", "content")

            list2 = lister.get_file_list()
            self.assertEqual(_states(list2), {FileState.MODIFIED: 1, FileState.UNCHANGED: 2})

            lister.output_options.previous_image = list2.get
            _write(root / "file4")

            list3 = lister.get_file_list()
            self.assertEqual(_states(list3), {FileState.ADDED: 1, FileState.UNCHANGED: 3})

            lister.output_options.previous_image = list3.get
            (root / "file4").unlink()
            (root / "sub" / "file3").unlink()

            list4 = lister.get_file_list()
            self.assertEqual(_states(list4), {FileState.UNCHANGED: 2})

            lister.output_options.previous_image = list4.get
            _write(root / "file4")

            list5 = lister.get_file_list()
            self.assertEqual(_states(list5), {FileState.ADDED: 1, FileState.UNCHANGED: 2})

    def test_size_date_and_checksum_criteria(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("file1", "sub/file2", "sub/file3", "file4"):
                _write(root / name)
            file1 = root / "file1"

            output = OutputOptions()
            lister = PathLister(root, output_options=output)

            list1 = lister.get_file_list()
            self.assertEqual(_states(list1), {FileState.ADDED: 4})

            output.previous_image = list1.get
            list2 = lister.get_file_list()
            self.assertEqual(_states(list1), {FileState.ADDED: 4})
            self.assertEqual(_states(list2), {FileState.UNCHANGED: 4})

            _write(file1, "content")
            list3 = lister.get_file_list()
            self.assertEqual(list3[str(file1)].state, FileState.MODIFIED)
            self.assertEqual(_states(list3), {FileState.MODIFIED: 1, FileState.UNCHANGED: 3})

            # same size, later date
            output.previous_image = list3.get
            _write(file1, "conten1")
            later = time.time() + 3600
            os.utime(file1, (later, later))

            list4 = lister.get_file_list()
            self.assertEqual(_states(list4), {FileState.UNCHANGED: 4})

            output.use_last_write_date_comparison = True
            list5 = lister.get_file_list()
            self.assertEqual(_states(list5), {FileState.MODIFIED: 1, FileState.UNCHANGED: 3})

            output.previous_image = list5.get
            list6 = lister.get_file_list()
            self.assertEqual(_states(list6), {FileState.UNCHANGED: 4})

            # previous images carry no checksum yet
            output.use_checksum_comparison = True
            list7 = lister.get_file_list()
            self.assertEqual(_states(list7), {FileState.MODIFIED: 4})
            self.assertTrue(all(record.checksum for record in list7))

            hashed = FileList(set_file_hash(record) for record in list6)
            output.previous_image = hashed.get
            list8 = lister.get_file_list()
            self.assertEqual(_states(list8), {FileState.UNCHANGED: 4})

            first = hashed[0]
            corrupted = FileList([*hashed, first.with_checksum("fakehash")])
            output.previous_image = corrupted.get
            list9 = lister.get_file_list()
            self.assertEqual(_states(list9), {FileState.MODIFIED: 1, FileState.UNCHANGED: 3})
            self.assertEqual(list9[first.path].state, FileState.MODIFIED)

    def test_listing_twice_gives_the_same_result(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("b.p", "a/c.p", "a/b.w"):
                _write(root / name, name)
            lister = PathLister(
                root,
                FilterOptions(include="**.p"),
                output_options=OutputOptions(use_checksum_comparison=True, hash_workers=3),
            )
            self.assertEqual(lister.get_file_list(), lister.get_file_list())
            self.assertEqual(lister.get_file_list().paths(), [str(root / "a" / "c.p"), str(root / "b.p")])


@unittest.skipIf(sys.platform == "win32", "hidden entries are dot-prefixed on POSIX only")
class FilteredListingTests(unittest.TestCase):
    def test_file_filters(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _write(root / "monfichier.txt")
            _write(root / ".subfolder" / "monfichier.pls")
            _write(root / ".git" / "testgit.txt")
            _write(root / ".svn" / "testsvn.txt")

            lister = PathLister(root, FilterOptions(exclude="**((*)).pls"))
            self.assertEqual(lister.get_file_list().paths(), [str(root / ".subfolder" / "monfichier.pls"), str(root / "monfichier.txt")])

            lister.filter_options = FilterOptions(exclude="**.pls")
            self.assertEqual(lister.get_file_list().paths(), [str(root / "monfichier.txt")])

            lister.filter_options = None
            self.assertEqual(len(lister.get_file_list()), 2)

            lister.filter_options = FilterOptions(exclude_regex="\\.[tT][xX][tT]")
            self.assertEqual(lister.get_file_list().paths(), [str(root / ".subfolder" / "monfichier.pls")])

            lister.filter_options = FilterOptions(include="**")
            self.assertEqual(len(lister.get_file_list()), 2)

            lister.filter_options = FilterOptions(include="**.txt")
            self.assertEqual(len(lister.get_file_list()), 1)

            lister.filter_options.extra_vcs_pattern_exclusion = ""
            self.assertEqual(len(lister.get_file_list()), 3)

            lister.filter_options = FilterOptions(extra_vcs_pattern_exclusion="")
            self.assertEqual(len(lister.get_file_list()), 4)

            lister.filter_options.override_output_list = f"{root / '.svn' / 'testsvn.txt'};{root / 'monfichier.txt'};{root / 'gone.txt'}"
            self.assertEqual(len(lister.get_file_list()), 2)

            lister.filter_options.override_output_list = None
            lister.filter_options.exclude_hidden_directories = True
            self.assertEqual(lister.get_file_list().paths(), [str(root / "monfichier.txt")])

            lister.filter_options.exclude_hidden_directories = False
            self.assertEqual(len(lister.get_file_list()), 4)

            lister.filter_options.recursive_listing = False
            self.assertEqual(len(lister.get_file_list()), 1)

    def test_directory_listing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for directory in (".git/sub", "folder1/sub", ".folder2", "folder_special/sub"):
                (root / directory).mkdir(parents=True)

            lister = PathLister(root)
            self.assertEqual(len(lister.get_directory_list()), 5)

            lister.filter_options = FilterOptions(include="**sub**")
            self.assertEqual(
                lister.get_directory_list(),
                [str(root / "folder1" / "sub"), str(root / "folder_special" / "sub")],
            )

            lister.filter_options = FilterOptions(include="**sub**", exclude="**special**")
            self.assertEqual(len(lister.get_directory_list()), 1)

            lister.filter_options = FilterOptions(exclude="**special**")
            self.assertEqual(len(lister.get_directory_list()), 3)

            lister.filter_options = FilterOptions(extra_vcs_pattern_exclusion="")
            self.assertEqual(len(lister.get_directory_list()), 7)

            lister.filter_options.override_output_list = [str(root / "folder1" / "sub"), str(root / "folder_special"), "missing"]
            self.assertEqual(
                lister.get_directory_list(),
                [str(root / "folder1" / "sub"), str(root / "folder_special")],
            )

            lister.filter_options.override_output_list = None
            lister.filter_options.exclude_hidden_directories = True
            self.assertEqual(len(lister.get_directory_list()), 4)

            lister.filter_options.recursive_listing = False
            self.assertEqual(
                lister.get_directory_list(),
                [str(root / "folder1"), str(root / "folder_special")],
            )


class IncludeExcludeListingTests(unittest.TestCase):
    def test_include_directory_and_exclude_suffix(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("file1.ext", "file2.ext", "file3.ext"):
                _write(root / "sourcedir" / name)
            _write(root / "other" / "file4.ext")

            lister = PathLister(root, FilterOptions(include="**sourcedir**", exclude="**2.ext"))

            self.assertEqual(
                lister.get_file_list().paths(),
                [str(root / "sourcedir" / "file1.ext"), str(root / "sourcedir" / "file3.ext")],
            )


class FilterSourceFilesTests(unittest.TestCase):
    def test_filters_given_paths_without_disk_access(self) -> None:
        root = os.path.join(os.path.abspath(os.sep), "nowhere", "sourcedir")
        lister = PathLister(root, FilterOptions(exclude_regex=".*[fF](ile)?2"))
        files = [
            os.path.join(root, ".git", "file1"),
            os.path.join(root, "legitfile1"),
            os.path.join(root, "sub", "legitfile2"),
        ]
        self.assertEqual(lister.filter_source_files(files), [os.path.join(root, "legitfile1")])


class ListingErrorTests(unittest.TestCase):
    def test_missing_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            lister = PathLister(Path(tmp).resolve() / "missing")
            with self.assertRaises(ListingIOError):
                lister.get_file_list()
            with self.assertRaises(ListingIOError):
                lister.get_directory_list()

    def test_invalid_filter_is_raised_before_listing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            lister = PathLister(Path(tmp).resolve() / "missing", FilterOptions(include_regex="(oops"))
            with self.assertRaises(FilterValidationError):
                lister.get_file_list()


if __name__ == "__main__":
    unittest.main()
