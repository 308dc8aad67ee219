"""Main CLI entry point for the slopopedia command.

This module provides the Typer application: one subcommand per wiki
operation, sharing the global --config/--verbosity/--no-color/--logdir
options. Every command builds its own WikiStore from the configuration;
there is no module-level page collection.
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, NoReturn, Optional, Tuple

import typer

from src.cli.config import ConfigLoader
from src.cli.errors import CLIError
from src.cli.models import ExitCode, ExportFormat, WikiConfig
from src.cli.output import OutputHandler
from src.exporter import (
    export_filename,
    export_page_json,
    export_pages_json,
    export_pages_markdown,
    page_to_markdown,
    write_export,
)
from src.models import WikiError
from src.page_feed import PageDirectory, PageFeedClient, PageSource
from src.version_history import HistoryIntegrityError, PageUpdate
from src.wiki_store import LocalStorage, StorageError, WikiStore

__version__ = "0.1.0"

app = typer.Typer(
    name="slopopedia",
    help="""A personal wiki in your terminal.

QUICK START:
  slopopedia create "My Page" -c "<p>Hello</p>"      # Create a page
  slopopedia list                                    # List pages
  slopopedia edit <id> -c "<p>Hi</p>" -m "Greeting"  # Edit (adds a version)
  slopopedia history <id>                            # Show versions
  slopopedia diff <id> 2                             # Compare v2 with v1
  slopopedia sync                                    # Merge pages from the file server""",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
    no_args_is_help=True,
)

# Module logger
logger = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Global options shared by all subcommands."""
    config_path: str = ConfigLoader.DEFAULT_CONFIG_PATH
    verbosity: int = 0
    no_color: bool = False


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"slopopedia_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"slopopedia version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: str = typer.Option(
        ConfigLoader.DEFAULT_CONFIG_PATH,
        "--config",
        help="Path to the YAML configuration file",
        metavar="PATH",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """A personal wiki in your terminal."""
    _configure_logging(verbosity, logdir)
    ctx.obj = CLIState(config_path=config_path, verbosity=verbosity, no_color=no_color)


def _state(ctx: typer.Context) -> CLIState:
    return ctx.obj if isinstance(ctx.obj, CLIState) else CLIState()


def _output(ctx: typer.Context) -> OutputHandler:
    state = _state(ctx)
    return OutputHandler(verbosity=state.verbosity, no_color=state.no_color)


@contextmanager
def _command_errors(output: OutputHandler) -> Iterator[None]:
    """Translate application errors into messages and exit codes."""
    try:
        yield
    except (typer.Exit, typer.Abort):
        raise
    except (StorageError, HistoryIntegrityError) as e:
        logger.error(f"Storage failure: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.STORAGE_ERROR)
    except WikiError as e:
        logger.error(f"Command failed: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except Exception as e:
        logger.exception("Unexpected error")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _open_store(ctx: typer.Context) -> Tuple[WikiStore, WikiConfig]:
    """Load the configuration and the persisted pages.

    Raises:
        CLIError: If the configuration is invalid
        StorageError: If the storage file is unreadable or corrupted
    """
    config = ConfigLoader.load(_state(ctx).config_path)
    store = WikiStore(LocalStorage(config.storage_path), key=config.storage_key)
    store.load()
    return store, config


def _not_found(output: OutputHandler, message: str) -> NoReturn:
    output.error(message)
    raise typer.Exit(ExitCode.NOT_FOUND)


def _read_content(content: Optional[str], content_file: Optional[str]) -> Optional[str]:
    if content_file is None:
        return content
    try:
        return Path(content_file).read_text(encoding="utf-8")
    except OSError as e:
        raise CLIError(f"Could not read content file {content_file}: {e}")


@app.command()
def init(
    ctx: typer.Context,
    storage_path: Optional[str] = typer.Option(
        None, "--storage", help="JSON file used as local storage"),
    feed_url: Optional[str] = typer.Option(
        None, "--feed-url", help="URL of the file server's page list", metavar="URL"),
    pages_dir: Optional[str] = typer.Option(
        None, "--pages-dir", help="Directory of page files to sync from instead of the URL"),
    export_dir: Optional[str] = typer.Option(
        None, "--export-dir", help="Directory export files are written to"),
    force: bool = typer.Option(
        False, "--force", help="Overwrite an existing configuration file"),
) -> None:
    """Write a configuration file with the given settings."""
    output = _output(ctx)
    config_path = _state(ctx).config_path

    with _command_errors(output):
        if os.path.exists(config_path) and not force:
            output.error(f"Configuration already exists at {config_path} (use --force)")
            raise typer.Exit(ExitCode.GENERAL_ERROR)

        config = WikiConfig()
        if storage_path:
            config.storage_path = storage_path
        if feed_url:
            config.feed_url = feed_url
        if pages_dir:
            config.pages_dir = pages_dir
        if export_dir:
            config.export_dir = export_dir

        ConfigLoader.save(config_path, config)
        output.success(f"Configuration written to {config_path}")


@app.command()
def create(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Page title"),
    content: str = typer.Option("", "--content", "-c", help="Page content (HTML)"),
    content_file: Optional[str] = typer.Option(
        None, "--content-file", help="Read page content from a file", metavar="PATH"),
    excerpt: Optional[str] = typer.Option(None, "--excerpt", "-e", help="Short summary"),
    tags: Optional[List[str]] = typer.Option(
        None, "--tag", "-t", help="Tag label (can be used multiple times)"),
) -> None:
    """Create a new page."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        body = _read_content(content, content_file) or ""
        page = store.create_page(title, body, excerpt=excerpt, tags=tags or None)
        output.success(f"Created page {page.id}: {page.title}")


@app.command()
def sample(ctx: typer.Context) -> None:
    """Create a sample page to try things out."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        page = store.create_sample_page()
        output.success(f"Created page {page.id}: {page.title}")


@app.command()
def edit(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="ID of the page to edit"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    content: Optional[str] = typer.Option(None, "--content", "-c", help="New content (HTML)"),
    content_file: Optional[str] = typer.Option(
        None, "--content-file", help="Read new content from a file", metavar="PATH"),
    excerpt: Optional[str] = typer.Option(None, "--excerpt", "-e", help="New excerpt"),
    tags: Optional[List[str]] = typer.Option(
        None, "--tag", "-t", help="Replacement tag list (can be used multiple times)"),
    changes: Optional[str] = typer.Option(
        None, "--changes", "-m", help="Description of the change"),
) -> None:
    """Edit a page, recording a new version."""
    output = _output(ctx)
    with _command_errors(output):
        update = PageUpdate(
            title=title,
            content=_read_content(content, content_file),
            excerpt=excerpt,
            tags=tags or None,
        )
        if update.is_empty():
            output.error("Nothing to update: give --title, --content, --excerpt or --tag")
            raise typer.Exit(ExitCode.GENERAL_ERROR)

        store, _ = _open_store(ctx)
        page = store.update_page(
            page_id,
            title=update.title,
            content=update.content,
            excerpt=update.excerpt,
            tags=update.tags,
            changes=changes,
        )
        if page is None:
            _not_found(output, f"Page {page_id} not found")
        output.success(f"Updated page {page.id} to version {page.current_version}")


@app.command()
def link(
    ctx: typer.Context,
    from_page_id: str = typer.Argument(..., help="Page the link starts from"),
    to_page_id: str = typer.Argument(..., help="Page the link points to"),
) -> None:
    """Link one page to another."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        if store.get_page(to_page_id) is None:
            output.warning(f"Page {to_page_id} does not exist; the link will not be shown")
        page = store.link_pages(from_page_id, to_page_id)
        if page is None:
            _not_found(output, f"Page {from_page_id} not found")
        output.success(f"Linked {from_page_id} → {to_page_id}")


@app.command("list")
def list_pages(
    ctx: typer.Context,
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only pages with this tag"),
) -> None:
    """List pages, optionally filtered by tag."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        pages = store.filter_by_tag(tag) if tag is not None else store.pages
        output.print_page_list(pages, tag=tag)


@app.command()
def show(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="ID of the page to show"),
) -> None:
    """Show the current version of a page."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        page = store.get_page(page_id)
        if page is None:
            _not_found(output, f"Page {page_id} not found")
        output.print_page(page, store.resolve_links(page))


@app.command()
def history(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="ID of the page"),
) -> None:
    """List the versions of a page, newest first."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        page = store.get_page(page_id)
        if page is None:
            _not_found(output, f"Page {page_id} not found")
        output.print_history(page, store.history_entries(page_id))


@app.command("show-version")
def show_version(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="ID of the page"),
    version: int = typer.Argument(..., help="Version number"),
) -> None:
    """Show a historical version of a page."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        snapshot = store.get_version(page_id, version)
        if snapshot is None:
            _not_found(output, f"Version {version} of page {page_id} not found")
        output.print_version(snapshot)


@app.command()
def diff(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="ID of the page"),
    version: int = typer.Argument(..., help="Version to compare"),
    against: Optional[int] = typer.Option(
        None, "--against", help="Version to compare with (default: the previous one)"),
    as_json: bool = typer.Option(False, "--json", help="Print the diff as JSON"),
) -> None:
    """Compare a version of a page with an earlier one."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        page = store.get_page(page_id)
        if page is None:
            _not_found(output, f"Page {page_id} not found")

        result = store.compare_versions(page_id, version, against)
        if result is None:
            other = against if against is not None else version - 1
            _not_found(output, f"Cannot compare version {version} with version {other}")

        if as_json:
            typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        else:
            output.print_diff(page, result)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to look for in titles and content"),
) -> None:
    """Search pages by title and content."""
    output = _output(ctx)
    with _command_errors(output):
        if not query.strip():
            output.print("Enter a search term to find pages.")
            return
        store, _ = _open_store(ctx)
        output.print_search_results(store.search_pages(query), query)


@app.command("random")
def random_page(ctx: typer.Context) -> None:
    """Show a random page."""
    output = _output(ctx)
    with _command_errors(output):
        store, _ = _open_store(ctx)
        page = store.random_page()
        if page is None:
            output.print("No pages available for random selection.")
            return
        output.print_page(page, store.resolve_links(page))


@app.command()
def export(
    ctx: typer.Context,
    export_format: ExportFormat = typer.Option(
        ExportFormat.JSON, "--format", "-f", help="Export format"),
    page_id: Optional[str] = typer.Option(
        None, "--page", "-p", help="Export only this page"),
    output_dir: Optional[str] = typer.Option(
        None, "--output", "-o", help="Directory to write to (default: export_dir)"),
) -> None:
    """Export all pages, or one page, to JSON or Markdown."""
    output = _output(ctx)
    with _command_errors(output):
        store, config = _open_store(ctx)
        directory = output_dir or config.export_dir

        if page_id is not None:
            page = store.get_page(page_id)
            if page is None:
                _not_found(output, f"Page {page_id} not found")
            if export_format is ExportFormat.JSON:
                content = export_page_json(page)
            else:
                content = page_to_markdown(page)
            filename = export_filename(export_format.extension, title=page.title)
        else:
            if export_format is ExportFormat.JSON:
                content = export_pages_json(store.pages)
            else:
                content = export_pages_markdown(store.pages)
            filename = export_filename(export_format.extension)

        target = write_export(directory, filename, content)
        output.success(f"Exported to {target}")


@app.command()
def sync(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(
        None, "--url", help="Page list URL (default: feed_url)", metavar="URL"),
    pages_dir: Optional[str] = typer.Option(
        None, "--pages-dir", help="Read page files from this directory instead of a URL"),
) -> None:
    """Merge pages from the file server into local storage.

    Fetched pages replace local pages with the same ID. If the server
    cannot be reached, local pages are left as they are.
    """
    output = _output(ctx)
    with _command_errors(output):
        store, config = _open_store(ctx)

        source: PageSource
        directory = pages_dir or (None if url else config.pages_dir)
        if directory:
            source = PageDirectory(directory)
            output.info(f"Found {source.count_pages()} page file(s) in {directory}")
        else:
            source = PageFeedClient(url or config.feed_url, timeout=config.feed_timeout)

        with output.spinner(f"Fetching pages from {source.describe()}..."):
            summary = store.load_file_based_pages(source)

        if summary is None:
            output.warning(
                f"Could not load pages from {source.describe()}, using local storage only"
            )
            return
        output.print_merge_summary(summary, source.describe())


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every locally stored page."""
    output = _output(ctx)
    with _command_errors(output):
        config = ConfigLoader.load(_state(ctx).config_path)
        if not yes:
            typer.confirm("Remove all locally stored pages?", abort=True)
        store = WikiStore(LocalStorage(config.storage_path), key=config.storage_key)
        store.reset()
        output.success("All local pages removed")


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
