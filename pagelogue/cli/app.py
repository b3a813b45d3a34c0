"""Click application: export saved chat pages and manage the export history."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn, Optional, TypeVar

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pagelogue.config import Settings, load_settings
from pagelogue.errors import ConfigError, PagelogueError
from pagelogue.export import ConversationExporter, ExportOptions
from pagelogue.lib.json import dumps
from pagelogue.lib.log import bind_context, configure_logging
from pagelogue.lib.models import ExportHistoryEntry
from pagelogue.rendering import list_formats, render_export, suggested_filename
from pagelogue.sources import HtmlPageAccessor
from pagelogue.storage import AsyncSQLiteStore, ExportHistoryManager
from pagelogue.types import ExportFormat, Site
from pagelogue.version import __version__

T = TypeVar("T")

SITE_CHOICES = [site.value for site in Site]


@dataclass
class AppEnv:
    settings: Settings
    console: Console
    err_console: Console

    def history(self) -> ExportHistoryManager:
        store = AsyncSQLiteStore(self.settings.db_path, quota_bytes=self.settings.storage_quota_bytes)
        return ExportHistoryManager(store)


def _fail(command: str, message: str) -> NoReturn:
    raise SystemExit(f"{command}: {message}")


def _run(command: str, coro: Coroutine[Any, Any, T]) -> T:
    bind_context(command=command)
    try:
        return asyncio.run(coro)
    except PagelogueError as exc:
        _fail(command, str(exc))


def _write_output(env: AppEnv, text: str, out: Optional[Path], filename: str) -> None:
    if out is None:
        click.echo(text, nl=False)
        return
    target = out / filename if out.is_dir() else out
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    env.err_console.print(f"Wrote {target}")


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug)")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines on stderr")
@click.option("--db", "db_path", type=click.Path(path_type=Path), help="History database path")
@click.version_option(__version__, prog_name="pagelogue")
@click.pass_context
def cli(ctx: click.Context, verbose: int, json_logs: bool, db_path: Optional[Path]) -> None:
    """Export AI chat conversations from saved pages and keep an export history."""
    configure_logging(verbosity=verbose, json_logs=json_logs)
    try:
        settings = load_settings(db_path=db_path)
    except PagelogueError as exc:
        _fail("pagelogue", str(exc))
    ctx.obj = AppEnv(settings=settings, console=Console(), err_console=Console(stderr=True))


@cli.command()
@click.argument("page", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--site", type=click.Choice(SITE_CHOICES), help="Chat site (detected from the page URL if omitted)")
@click.option("--url", help="Conversation URL (read from the page if omitted)")
@click.option("--format", "fmt", type=click.Choice(list_formats()), help="Output format")
@click.option("--out", type=click.Path(path_type=Path), help="Output file or directory (stdout if omitted)")
@click.option("--no-metadata", is_flag=True, help="Drop per-message metadata")
@click.option("--no-timestamps", is_flag=True, help="Drop per-message timestamps")
@click.option("--no-raw-snippet", is_flag=True, help="Drop raw markup snippets from message metadata")
@click.option("--no-validate", is_flag=True, help="Skip validation rules")
@click.option("--save", is_flag=True, help="Record the export in the history")
@click.option("--force-duplicate", is_flag=True, help="Do not warn when the URL was exported before")
@click.pass_obj
def export(
    env: AppEnv,
    page: Path,
    site: Optional[str],
    url: Optional[str],
    fmt: Optional[str],
    out: Optional[Path],
    no_metadata: bool,
    no_timestamps: bool,
    no_raw_snippet: bool,
    no_validate: bool,
    save: bool,
    force_duplicate: bool,
) -> None:
    """Export the conversation in a saved chat PAGE."""
    accessor = HtmlPageAccessor.from_path(page, url=url)

    async def _export():
        resolved = Site.from_string(site) if site else Site.from_url(await accessor.page_url())
        if resolved is None:
            raise ConfigError("could not detect the chat site from the page URL; pass --site")
        exporter = ConversationExporter(accessor, resolved, history=env.history(), settings=env.settings)
        options = ExportOptions(
            format=ExportFormat.parse(fmt) if fmt else env.settings.default_format,
            include_metadata=not no_metadata,
            include_timestamps=not no_timestamps,
            include_raw_snippet=not no_raw_snippet,
            validate_data=not no_validate,
            save_to_storage=save,
            force_duplicate=force_duplicate,
            url=url,
        )
        return await exporter.export_conversation(options)

    result = _run("export", _export())
    for warning in result.metadata.parsing_errors:
        env.err_console.print(f"[yellow]Warning:[/yellow] {escape(warning)}")
    _write_output(env, render_export(result), out, suggested_filename(result))
    if save:
        env.err_console.print(f"Saved to history as {result.id}")


@cli.group()
def history() -> None:
    """Inspect and maintain the export history."""


def _history_table(entries: list[ExportHistoryEntry]) -> Table:
    table = Table(title=f"Export History (n={len(entries)})")
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Site")
    table.add_column("Format")
    table.add_column("Exported")
    table.add_column("Messages", justify="right")
    table.add_column("Size", justify="right")
    for entry in entries:
        table.add_row(
            entry.export_id,
            escape(entry.title),
            entry.site.value,
            entry.format.value,
            entry.exported_at,
            str(entry.message_count),
            _format_size(entry.file_size),
        )
    return table


@history.command("list")
@click.option("--limit", type=int, default=None, help="Show at most N entries")
@click.option("--json", "as_json", is_flag=True, help="Print entries as JSON")
@click.pass_obj
def history_list(env: AppEnv, limit: Optional[int], as_json: bool) -> None:
    """List past exports, most recent first."""
    entries = _run("history list", env.history().get_history(limit))
    if as_json:
        click.echo(dumps([entry.to_payload() for entry in entries], indent=True))
        return
    if not entries:
        env.console.print("No exports recorded.")
        return
    env.console.print(_history_table(entries))


@history.command("stats")
@click.option("--json", "as_json", is_flag=True, help="Print statistics as JSON")
@click.pass_obj
def history_stats(env: AppEnv, as_json: bool) -> None:
    """Summarize the export history."""
    stats = _run("history stats", env.history().get_statistics())
    if as_json:
        click.echo(dumps(stats.to_payload(), indent=True))
        return

    summary = Table(title="Export Statistics", show_header=False)
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Exports", str(stats.total_exports))
    summary.add_row("Total size", _format_size(stats.total_file_size))
    summary.add_row("Average size", _format_size(stats.average_file_size))
    summary.add_row("Messages", str(stats.total_messages))
    summary.add_row("Average messages", f"{stats.average_messages:.2f}")
    summary.add_row("Oldest", stats.oldest_export or "-")
    summary.add_row("Newest", stats.newest_export or "-")
    env.console.print(summary)

    breakdown = Table(title="Breakdown")
    breakdown.add_column("Group")
    breakdown.add_column("Name")
    breakdown.add_column("Exports", justify="right")
    for site, count in stats.site_breakdown.items():
        breakdown.add_row("site", site.value, str(count))
    for fmt, count in stats.format_breakdown.items():
        breakdown.add_row("format", fmt.value, str(count))
    env.console.print(breakdown)


@history.command("show")
@click.argument("export_id")
@click.option("--format", "fmt", type=click.Choice(list_formats()), help="Render in another format")
@click.option("--out", type=click.Path(path_type=Path), help="Output file or directory (stdout if omitted)")
@click.pass_obj
def history_show(env: AppEnv, export_id: str, fmt: Optional[str], out: Optional[Path]) -> None:
    """Re-render a saved export."""
    saved = _run("history show", env.history().get_export_for_redownload(export_id))
    resolved = ExportFormat.parse(fmt) if fmt else saved.format
    _write_output(env, render_export(saved, resolved), out, suggested_filename(saved, resolved))


@history.command("remove")
@click.argument("export_id")
@click.pass_obj
def history_remove(env: AppEnv, export_id: str) -> None:
    """Remove an export and its saved data."""
    removed = _run("history remove", env.history().remove_from_history(export_id))
    env.console.print(f"Removed {export_id}" if removed else f"No export {export_id} in history")


@history.command("cleanup")
@click.option("--days", type=click.IntRange(min=0), default=None, help="Retention period (default from settings)")
@click.pass_obj
def history_cleanup(env: AppEnv, days: Optional[int]) -> None:
    """Remove exports older than the retention period."""
    retention = env.settings.retention_days if days is None else days
    removed = _run("history cleanup", env.history().cleanup_old_history(retention))
    env.console.print(f"Removed {len(removed)} export(s) older than {retention} days")


@history.command("verify")
@click.pass_obj
def history_verify(env: AppEnv) -> None:
    """Check that every history entry still has its saved data."""
    dangling = _run("history verify", env.history().verify_integrity())
    if not dangling:
        env.console.print("History is consistent.")
        return
    for export_id in dangling:
        env.err_console.print(f"[red]Missing data:[/red] {export_id}")
    raise SystemExit(1)


def main() -> None:
    cli()


__all__ = ["AppEnv", "cli", "main"]
