"""
CLI entry point - Typer command line interface

Listing flow:
1. build the filter, git and output options from the command line
2. load the previous snapshot, if any
3. list the directories or files
4. report, and save the new snapshot
"""

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from pathlister.core import (
    FilterOptions,
    GitFilterOptions,
    OutputOptions,
    PathLister,
    find_deleted,
)
from pathlister.core.options import DEFAULT_HASH_WORKERS
from pathlister.errors import PathListerError, VcsError
from pathlister.history import load_snapshot, save_snapshot
from pathlister.reporters import JsonReporter, ListingResult, RichReporter

# Typer application
app = typer.Typer(
    name="pathlister",
    help="pathlister: list the source files of a build and what changed since the last one.",
    add_completion=False,
)

# Rich consoles: results on stdout, diagnostics on stderr
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_root(target: str) -> Path:
    root = Path(target).resolve()
    if not root.exists():
        err_console.print(f"[red]Error:[/red] Path does not exist: {target}")
        raise typer.Exit(1)
    if not root.is_dir():
        err_console.print(f"[red]Error:[/red] Path is not a directory: {target}")
        raise typer.Exit(1)
    return root


def _build_filter_options(
    include: Optional[list[str]],
    exclude: Optional[list[str]],
    include_regex: Optional[list[str]],
    exclude_regex: Optional[list[str]],
    no_vcs_exclusion: bool,
    vcs_pattern: Optional[list[str]],
    override: Optional[list[str]],
    exclude_hidden: bool,
    top_level: bool,
) -> FilterOptions:
    if no_vcs_exclusion:
        vcs_exclusion: Optional[list[str] | str] = ""
    else:
        vcs_exclusion = vcs_pattern or None
    return FilterOptions(
        include=include,
        exclude=exclude,
        include_regex=include_regex,
        exclude_regex=exclude_regex,
        extra_vcs_pattern_exclusion=vcs_exclusion,
        override_output_list=override,
        exclude_hidden_directories=exclude_hidden,
        recursive_listing=not top_level,
    )


def _reporter(format: str):
    if format == "json":
        return JsonReporter()
    return RichReporter(console)


def _fail(error: PathListerError) -> NoReturn:
    label = "Git error" if isinstance(error, VcsError) else "Error"
    err_console.print(f"[red]{label}:[/red] {error}")
    raise typer.Exit(1)


IncludeOption = typer.Option(None, "--include", "-i", help="Glob a path must match (repeatable, ';' separated)")
ExcludeOption = typer.Option(None, "--exclude", "-e", help="Glob rejecting the paths it matches (repeatable)")
IncludeRegexOption = typer.Option(None, "--include-regex", help="Regex a path must contain (repeatable)")
ExcludeRegexOption = typer.Option(None, "--exclude-regex", help="Regex rejecting the paths it matches (repeatable)")
NoVcsOption = typer.Option(False, "--no-vcs-exclusion", help="Also list .git, .svn... metadata")
VcsPatternOption = typer.Option(None, "--vcs-pattern", help="Replace the VCS metadata patterns (gitignore syntax)")
OverrideOption = typer.Option(None, "--override", help="List exactly these paths, if they exist (repeatable)")
HiddenOption = typer.Option(False, "--exclude-hidden", help="Skip hidden directories")
TopLevelOption = typer.Option(False, "--top-level", help="Do not walk sub directories")
FormatOption = typer.Option("rich", "--format", "-f", help="Output format: rich (default) or json")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Show debug logs")


@app.command()
def files(
    target: str = typer.Argument(".", help="Source directory to list"),
    include: Optional[list[str]] = IncludeOption,
    exclude: Optional[list[str]] = ExcludeOption,
    include_regex: Optional[list[str]] = IncludeRegexOption,
    exclude_regex: Optional[list[str]] = ExcludeRegexOption,
    no_vcs_exclusion: bool = NoVcsOption,
    vcs_pattern: Optional[list[str]] = VcsPatternOption,
    override: Optional[list[str]] = OverrideOption,
    exclude_hidden: bool = HiddenOption,
    top_level: bool = TopLevelOption,
    git_uncommitted: bool = typer.Option(
        False, "--git-uncommitted", help="Only files modified, staged or untracked in git"
    ),
    git_branch_only: bool = typer.Option(
        False, "--git-branch-only", help="Only files committed on the current branch and no other"
    ),
    branch: Optional[str] = typer.Option(None, "--branch", help="Current branch name (detached HEAD)"),
    origin_commit: Optional[str] = typer.Option(
        None, "--origin-commit", help="Last commit shared with other branches (HEAD: none)"
    ),
    compare_dates: bool = typer.Option(False, "--compare-dates", help="Compare last write times"),
    checksum: bool = typer.Option(False, "--checksum", help="Compare content checksums"),
    workers: int = typer.Option(DEFAULT_HASH_WORKERS, "--workers", min=1, help="Hashing threads"),
    previous: Optional[Path] = typer.Option(None, "--previous", help="Snapshot of the previous build (JSON)"),
    save: Optional[Path] = typer.Option(None, "--save", help="Write this build's snapshot (JSON)"),
    show_deleted: bool = typer.Option(False, "--show-deleted", help="Also report files gone since the snapshot"),
    format: str = FormatOption,
    verbose: bool = VerboseOption,
) -> None:
    """
    List the files of a source directory and their state since the previous build.

    Examples:
        pathlister files src
        pathlister files src -i "**.p" -e "**/test/**" --checksum --previous build.json --save build.json
        pathlister files . --git-uncommitted --git-branch-only --format json
    """
    _configure_logging(verbose)
    root = _resolve_root(target)

    filter_options = _build_filter_options(
        include, exclude, include_regex, exclude_regex,
        no_vcs_exclusion, vcs_pattern, override, exclude_hidden, top_level,
    )

    git_filter = None
    if git_uncommitted or git_branch_only or branch or origin_commit:
        git_filter = GitFilterOptions(
            include_uncommitted=git_uncommitted,
            include_branch_only_commits=git_branch_only,
            current_branch_name=branch,
            branch_origin_commit=origin_commit,
        )

    try:
        snapshot = load_snapshot(previous) if previous else None
        output_options = OutputOptions(
            use_last_write_date_comparison=compare_dates,
            use_checksum_comparison=checksum,
            previous_image=snapshot.get if snapshot is not None else None,
            hash_workers=workers,
        )
        lister = PathLister(root, filter_options, git_filter, output_options)
        file_list = lister.get_file_list()
        if save:
            save_snapshot(file_list, save)
    except PathListerError as e:
        _fail(e)

    deleted = find_deleted(snapshot, file_list) if show_deleted and snapshot is not None else []
    result = ListingResult(
        root=str(root),
        files=file_list,
        deleted=deleted,
        errors=[(path, str(error)) for path, error in lister.errors],
    )
    _reporter(format).report(result)


@app.command()
def dirs(
    target: str = typer.Argument(".", help="Source directory to list"),
    include: Optional[list[str]] = IncludeOption,
    exclude: Optional[list[str]] = ExcludeOption,
    include_regex: Optional[list[str]] = IncludeRegexOption,
    exclude_regex: Optional[list[str]] = ExcludeRegexOption,
    no_vcs_exclusion: bool = NoVcsOption,
    vcs_pattern: Optional[list[str]] = VcsPatternOption,
    override: Optional[list[str]] = OverrideOption,
    exclude_hidden: bool = HiddenOption,
    top_level: bool = TopLevelOption,
    format: str = FormatOption,
    verbose: bool = VerboseOption,
) -> None:
    """
    List the directories of a source directory.

    Examples:
        pathlister dirs src --exclude-hidden
        pathlister dirs src --top-level --format json
    """
    _configure_logging(verbose)
    root = _resolve_root(target)

    filter_options = _build_filter_options(
        include, exclude, include_regex, exclude_regex,
        no_vcs_exclusion, vcs_pattern, override, exclude_hidden, top_level,
    )

    lister = PathLister(root, filter_options)
    try:
        directories = lister.get_directory_list()
    except PathListerError as e:
        _fail(e)

    result = ListingResult(
        root=str(root),
        directories=directories,
        errors=[(path, str(error)) for path, error in lister.errors],
    )
    _reporter(format).report(result)


@app.command()
def version() -> None:
    """Show the version of pathlister."""
    from pathlister import __version__
    console.print(f"[bold]pathlister[/bold] v{__version__}")


if __name__ == "__main__":
    app()
