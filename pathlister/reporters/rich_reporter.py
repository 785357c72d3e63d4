"""
Rich terminal reporter - colored table of the listed paths
"""

import os

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pathlister.core.models import FileRecord, FileState
from pathlister.reporters.base import ListingResult


STATE_STYLES: dict[FileState, tuple[str, str]] = {
    FileState.ADDED: ("+", "green"),
    FileState.MODIFIED: ("~", "yellow"),
    FileState.UNCHANGED: ("=", "dim"),
    FileState.DELETED: ("-", "red"),
}


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


class RichReporter:
    """Rich terminal reporter"""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def _relative(self, root: str, path: str) -> str:
        try:
            return os.path.relpath(path, root)
        except ValueError:
            return path

    def report(self, result: ListingResult) -> None:
        """Print the listing as a table"""
        if result.files is None:
            self._print_directories(result)
        else:
            self._print_files(result)

        if result.errors:
            self.console.print()
            self.console.print(f"[yellow]{len(result.errors)} entries could not be read:[/yellow]")
            for path, message in result.errors:
                self.console.print(f"  [dim]{path}: {message}[/dim]")

        self._print_summary(result)

    def _print_directories(self, result: ListingResult) -> None:
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Directory", style="cyan")
        for path in result.directories or []:
            table.add_row(self._relative(result.root, path))
        self.console.print(table)

    def _print_files(self, result: ListingResult) -> None:
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("", width=1)
        table.add_column("File")
        table.add_column("Size", justify="right")
        table.add_column("State")

        rows: list[FileRecord] = list(result.files or []) + list(result.deleted)
        for record in rows:
            icon, style = STATE_STYLES[record.state]
            table.add_row(
                f"[{style}]{icon}[/{style}]",
                f"[{style}]{self._relative(result.root, record.path)}[/{style}]",
                _format_size(record.size),
                f"[{style}]{record.state.value}[/{style}]",
            )
        self.console.print(table)

    def _print_summary(self, result: ListingResult) -> None:
        stats = result.stats
        if result.files is None:
            summary = f"{stats['directories']} directories"
        else:
            summary = (
                f"{stats['files']} files: "
                f"[green]{stats['added']} added[/green], "
                f"[yellow]{stats['modified']} modified[/yellow], "
                f"{stats['unchanged']} unchanged"
            )
            if result.deleted:
                summary += f", [red]{stats['deleted']} deleted[/red]"

        self.console.print()
        self.console.print(Panel(summary, title=result.root, border_style="cyan", expand=False))
