"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
status messages, page listings, page views, history listings and version
diffs. Supports verbosity levels and the --no-color flag.
"""

import html
from contextlib import contextmanager
from typing import Iterator, List, Optional

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner
from rich.table import Table

from src.models import Page, Version, display_timestamp
from src.version_history import DiffLineKind, DiffSectionKind, HistoryEntry, VersionDiff
from src.wiki_store import MergeSummary, highlight_search_term, page_excerpt, strip_html


class OutputHandler:
    """Handles all terminal output using Rich library.

    User content (titles, page text, tags) is escaped before printing so it
    is never interpreted as Rich markup.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Page created")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False,
                 console: Optional[Console] = None):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
            console: Console to print to (a new one is created by default)
        """
        self.verbosity = verbosity
        self.console = console or Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(escape(message))

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner for single operations.

        Example:
            >>> with handler.spinner("Fetching pages..."):
            ...     store.load_file_based_pages(source)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_page_list(self, pages: List[Page], tag: Optional[str] = None) -> None:
        """Display page cards, optionally as a tag-filtered listing.

        Args:
            pages: Pages to list
            tag: Tag the listing is filtered by, highlighted in each card
        """
        if tag is not None:
            self.console.print(
                f"[bold]Pages tagged with \"{escape(tag)}\" ({len(pages)})[/bold]\n"
            )

        if not pages:
            if tag is None:
                self.console.print("[dim]No pages yet. Create the first one![/dim]")
            return

        for page in pages:
            self.console.print(f"[bold]{escape(page.title)}[/bold] [dim]({escape(page.id)})[/dim]")
            self.console.print(f"  {escape(page_excerpt(page))}")
            if page.tags:
                self.console.print(f"  {self._format_tags(page.tags, active=tag)}")
            self.console.print(
                f"  [dim]Created: {display_timestamp(page.created)}  "
                f"Links: {len(page.links)}[/dim]\n"
            )

    def print_page(self, page: Page, linked_pages: List[Page]) -> None:
        """Display the current state of a page."""
        self.console.print(f"\n[bold underline]{escape(page.title)}[/bold underline]")
        if page.tags:
            self.console.print(self._format_tags(page.tags))

        meta = (
            f"Created: {display_timestamp(page.created)}  "
            f"Updated: {display_timestamp(page.updated)}  "
            f"Links: {len(page.links)}"
        )
        if page.has_history:
            meta += f"  Version: {page.current_version or len(page.history)}"
        self.console.print(f"[dim]{meta}[/dim]\n")

        self.console.print(escape(strip_html(page.content)))

        if linked_pages:
            self.console.print("\n[bold]Linked pages:[/bold]")
            for target in linked_pages:
                self.console.print(f"  → {escape(target.title)} [dim]({escape(target.id)})[/dim]")

        if page.has_history:
            self.console.print(
                f"\n[dim]{len(page.history)} versions. "
                f"Run 'slopopedia history {escape(page.id)}' to list them.[/dim]"
            )

    def print_version(self, version: Version) -> None:
        """Display a historical snapshot of a page."""
        self.console.print(
            f"\n[cyan]Viewing Version {version.version} from "
            f"{display_timestamp(version.updated)}[/cyan]"
        )
        self.console.print(f"[bold underline]{escape(version.title)}[/bold underline]")
        self.console.print(
            f"[dim]Version: {version.version}  Changes: {escape(version.changes)}[/dim]\n"
        )
        self.console.print(escape(strip_html(version.content)))

    def print_history(self, page: Page, entries: List[HistoryEntry]) -> None:
        """Display the version history of a page, newest first."""
        table = Table(title=f"Page History: {escape(page.title)}")
        table.add_column("Version", justify="right")
        table.add_column("Date")
        table.add_column("Changes")
        table.add_column("Actions")

        for entry in entries:
            actions = ["view"]
            if entry.can_compare:
                actions.append("compare with previous")
            label = str(entry.version)
            if entry.is_current:
                label = f"[bold green]{entry.version} (current)[/bold green]"
            table.add_row(
                label,
                display_timestamp(entry.updated),
                escape(entry.changes),
                ", ".join(actions),
            )

        self.console.print(table)

    def print_diff(self, page: Page, diff: VersionDiff) -> None:
        """Display a version diff section by section."""
        self.console.print(
            f"\n[cyan]Comparing Version {diff.new_version} with Version {diff.old_version}[/cyan]"
        )
        self.console.print(f"[bold]Page Diff: {escape(page.title)}[/bold]")
        self.console.print(
            f"[dim]Comparing: v{diff.old_version} → v{diff.new_version}  "
            f"Date range: {display_timestamp(diff.old_updated)} → "
            f"{display_timestamp(diff.new_updated)}[/dim]"
        )

        for section in diff.sections:
            if section.kind is DiffSectionKind.SUMMARY:
                self.console.print("\n[bold]Change Summary[/bold]")
                self.console.print(
                    f"  Version {section.version} ({display_timestamp(section.updated)})"
                )
                self.console.print(f"  [italic]Changes: {escape(section.changes or '')}[/italic]")
            elif section.kind is DiffSectionKind.TITLE_CHANGE:
                self.console.print("\n[bold]Title Changed[/bold]")
                self.console.print(f"  [red]- {escape(section.old_title or '')}[/red]")
                self.console.print(f"  [green]+ {escape(section.new_title or '')}[/green]")
            elif section.kind is DiffSectionKind.CONTENT_CHANGE:
                self.console.print("\n[bold]Content Changes[/bold]")
                for line in section.lines:
                    color = "green" if line.kind is DiffLineKind.ADDED else "red"
                    text = escape(html.unescape(line.text))
                    self.console.print(f"  [{color}]{line.prefix} {text}[/{color}]")
            else:
                self.console.print(f"\n[yellow]{escape(section.message or '')}[/yellow]")

    def print_search_results(self, pages: List[Page], query: str) -> None:
        """Display search results with the query highlighted."""
        if not pages:
            self.console.print(f"[dim]No pages found for \"{escape(query)}\".[/dim]")
            return

        plural = "" if len(pages) == 1 else "s"
        self.console.print(f"{len(pages)} page{plural} found for \"{escape(query)}\":\n")
        for page in pages:
            title = self._highlight(page.title, query)
            excerpt = self._highlight(page_excerpt(page), query)
            self.console.print(f"[bold]{title}[/bold] [dim]({escape(page.id)})[/dim]")
            self.console.print(f"  {excerpt}")
            self.console.print(
                f"  [dim]Updated: {display_timestamp(page.updated)}  "
                f"Links: {len(page.links)}[/dim]\n"
            )

    def print_merge_summary(self, summary: MergeSummary, source: str) -> None:
        """Display the result of merging fetched pages."""
        self.console.print(f"\n[bold]Sync Summary[/bold] [dim]({escape(source)})[/dim]")
        if summary.added:
            self.console.print(f"  [green]+[/green] Added: {len(summary.added)} page(s)")
        if summary.replaced:
            self.console.print(f"  [blue]↓[/blue] Replaced: {len(summary.replaced)} page(s)")
        if summary.skipped:
            self.console.print(f"  [yellow]⊘[/yellow] Skipped: {len(summary.skipped)} page(s)")
        if not (summary.added or summary.replaced or summary.skipped):
            self.console.print("\n[yellow]No pages in feed[/yellow]")

    def _format_tags(self, tags: List[str], active: Optional[str] = None) -> str:
        rendered = []
        for tag in tags:
            if tag == active:
                rendered.append(f"[reverse]#{escape(tag)}[/reverse]")
            else:
                rendered.append(f"[magenta]#{escape(tag)}[/magenta]")
        return " ".join(rendered)

    def _highlight(self, text: str, query: str) -> str:
        # Escape first, then mark matches; the query is escaped the same way
        # so matches line up with the escaped text
        return highlight_search_term(
            escape(text), escape(query), open_tag="[reverse]", close_tag="[/reverse]"
        )
