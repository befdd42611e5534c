"""User feedback utilities for the command line."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
import rich.box

from xcode_test_engine.models.data_models import ResultKind, ResultRecord

logger = logging.getLogger(__name__)


class StatusIcon:
    """ASCII status icons for CLI display."""

    SUCCESS = "[bold green]✓[/bold green]"
    ERROR = "[bold red]✗[/bold red]"
    WARNING = "[bold yellow]⚠[/bold yellow]"
    INFO = "[bold blue]●[/bold blue]"
    DEBUG = "[dim]◦[/dim]"
    SKIP = "[dim]○[/dim]"
    BROKEN = "[bold red]▲[/bold red]"
    UNSOUND = "[bold magenta]?[/bold magenta]"


_RESULT_ICONS = {
    ResultKind.PASS: StatusIcon.SUCCESS,
    ResultKind.FAIL: StatusIcon.ERROR,
    ResultKind.SKIP: StatusIcon.SKIP,
    ResultKind.BROKEN: StatusIcon.BROKEN,
    ResultKind.UNSOUND: StatusIcon.UNSOUND,
}


class UserFeedback:
    """Rich console feedback, quiet and verbose aware."""

    def __init__(self, verbose: bool = False, quiet: bool = False):
        self.verbose = verbose
        self.quiet = quiet
        self.console = Console(stderr=True)
        self.error_console = Console(stderr=True)

    def success(self, message: str, details: Optional[str] = None):
        """Display success message with checkmark icon."""
        if not self.quiet:
            self.console.print(f"{StatusIcon.SUCCESS} {escape(message)}")
            if details and self.verbose:
                self._print_details(details, "green")

    def error(self, message: str, suggestion: Optional[str] = None, details: Optional[str] = None):
        """Display error message with error icon and optional suggestion."""
        # Always show errors, even in quiet mode
        self.error_console.print(f"{StatusIcon.ERROR} [bold red]Error:[/bold red] {escape(message)}")

        if suggestion:
            self.error_console.print(f"  [yellow]Suggestion:[/yellow] {escape(suggestion)}")

        if details and self.verbose:
            self._print_details(details, "red", console=self.error_console)

    def warning(self, message: str, suggestion: Optional[str] = None):
        """Display warning message with warning icon."""
        if not self.quiet:
            self.console.print(f"{StatusIcon.WARNING} [bold yellow]Warning:[/bold yellow] {escape(message)}")

            if suggestion:
                self.console.print(f"  [yellow]{escape(suggestion)}[/yellow]")

    def info(self, message: str, details: Optional[str] = None):
        """Display info message with info icon."""
        if not self.quiet:
            self.console.print(f"{StatusIcon.INFO} {escape(message)}")

            if details and self.verbose:
                self._print_details(details, "blue")

    def debug(self, message: str, details: Optional[str] = None):
        """Display debug message (only in verbose mode)."""
        if self.verbose and not self.quiet:
            self.console.print(f"{StatusIcon.DEBUG} [dim]{escape(message)}[/dim]")
            if details:
                self._print_details(details, "dim")

    @contextmanager
    def status_spinner(self, message: str, spinner_style: str = "dots") -> Iterator[None]:
        """Show a spinner while a blocking step runs."""
        if self.quiet:
            yield
            return
        with self.console.status(f"[bold cyan]{message}[/bold cyan]", spinner=spinner_style):
            yield

    def results_table(self, records: List[ResultRecord]):
        """Display test results with one row per record."""
        if self.quiet or not records:
            return
        table = Table(title="Test Results", box=rich.box.SIMPLE_HEAVY, show_lines=False)
        table.add_column("", width=2)
        table.add_column("Test", style="bold")
        table.add_column("Result")
        table.add_column("Duration", justify="right")

        for record in records:
            duration = f"{record.duration:.3f}s" if record.duration is not None else ""
            table.add_row(_RESULT_ICONS[record.result], Text(record.name), record.result.value, duration)
        self.console.print(table)

        for record in records:
            if record.user_data and record.result in (ResultKind.FAIL, ResultKind.BROKEN, ResultKind.UNSOUND):
                self._print_details(record.user_data, "red", title=record.name)

    def summary_panel(self, title: str, items: Dict[str, Any], style: str = "green"):
        """Display a summary panel with key/value rows."""
        if self.quiet:
            return
        content = "\n".join(f"[bold]{key}:[/bold] {value}" for key, value in items.items())
        self.console.print(Panel(content, title=title, border_style=style, expand=False))

    def _print_details(self, details: str, style: str, console: Optional[Console] = None, title: Optional[str] = None):
        target = console or self.console
        target.print(Panel(Text(details), title=title, border_style=style, expand=False))
