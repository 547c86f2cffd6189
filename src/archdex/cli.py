"""Command line interface for archdex."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from archdex.config import ArchdexConfig, ConfigError, ConfigManager, resolve_with_precedence
from archdex.indexer import ArchiveScanner, IndexerError, generate_index
from archdex.parsing import (
    format_title,
    match_rule,
    parse_document_date,
    parse_document_year,
    strip_extension,
)
from archdex.query import ALL, ArchiveSession, ArchiveView, QueryFilters, resolve_category

console = Console()


def _configure_logging(level: str) -> None:
    """Route ``archdex`` log records to stderr through a Rich handler.

    Args:
        level: Logging level name from configuration.
    """

    logger = logging.getLogger("archdex")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False


def _load_config(cli_overrides: dict[str, Any] | None = None) -> ArchdexConfig:
    manager = ConfigManager()
    config = manager.load(cli_overrides=cli_overrides or None)
    _configure_logging(config.logging.level)
    return config


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Print ``message`` unless quiet/summary settings suppress its mode.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _format_summary_line(command: str, target: Path | str, metrics: dict[str, Any]) -> str:
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(target))}: {parts}.[/green]"


def _output_modes(
    ctx: click.Context,
    config: ArchdexConfig,
    *,
    quiet: bool,
    summary_mode: bool,
    json_output: bool,
) -> tuple[bool, bool]:
    """Combine flags with configured defaults into ``(quiet, summary_only)``.

    Raises:
        click.ClickException: If the requested modes conflict.
    """

    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE
    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        return False, False

    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )
    return quiet_enabled, summary_only


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign ``value`` at the dotted ``path`` inside ``target``.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """

    node = target
    for segment in path[:-1]:
        existing = node.setdefault(segment, {})
        if not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


def _render_view(view: ArchiveView) -> Table | None:
    if view.is_empty:
        return None
    table = Table(show_lines=False, expand=False)
    table.add_column("Year", style="bold green")
    table.add_column("Title")
    table.add_column("Date", style="dim")
    table.add_column("Category")
    table.add_column("URL", style="cyan")
    for group in view.groups:
        plural = "" if group.count == 1 else "s"
        label = f"{group.year or 'undated'} ({group.count} file{plural})"
        for position, entry in enumerate(group.entries):
            table.add_row(
                label if position == 0 else "",
                escape(entry.title),
                entry.doc_date,
                "Photo" if entry.type == "photo" else escape(entry.display_category),
                escape(entry.url),
            )
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="archdex")
def cli() -> None:
    """Index an archive of dated documents and photos, then search and filter it."""


@cli.command()
@click.argument("root", required=False, type=click.Path(file_okay=False, path_type=str))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=str),
    help="Where to write the JSON index (defaults to archive.output).",
)
@click.option("--url-prefix", type=str, help="First URL segment for indexed files.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the build.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def index(
    ctx: click.Context,
    root: str | None,
    output: str | None,
    url_prefix: str | None,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Walk ROOT (defaults to archive.root) and write a fresh archive index.

    The whole tree is read before anything is written; a missing or unreadable
    root aborts the build and leaves any previous index untouched.
    """

    overrides: dict[str, Any] = {}
    if root:
        overrides["archive.root"] = root
    if output:
        overrides["archive.output"] = output
    if url_prefix is not None:
        overrides["archive.url_prefix"] = url_prefix

    try:
        config = _load_config(overrides)
        quiet_enabled, summary_only = _output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return

    root_path = Path(config.archive.root).expanduser()
    output_path = Path(config.archive.output).expanduser()
    try:
        result = generate_index(
            root_path, output_path, ArchiveScanner.from_settings(config.archive)
        )
    except IndexerError as exc:
        _handle_cli_error(
            str(exc),
            code="index_failed",
            json_output=json_output,
            details={"root": str(root_path)},
            original=exc,
        )
        return
    except OSError as exc:
        _handle_cli_error(
            f"Could not write index to {output_path}: {exc}",
            code="write_failed",
            json_output=json_output,
            original=exc,
        )
        return

    counts = {"entries": result.count, **result.counts_by_type()}
    if json_output:
        console.print_json(
            data={"root": str(result.root), "output": str(result.output), "counts": counts}
        )
        return

    _emit_message(
        f"Generated {result.count} entries",
        mode="detail",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )
    _emit_message(
        _format_summary_line("Index", result.output, counts),
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )


@cli.command()
@click.option(
    "--index",
    "index_source",
    type=str,
    help="Index path or http(s) URL (defaults to query.index_source).",
)
@click.option("-s", "--search", "query", type=str, default="", help="Free-text search.")
@click.option("--year", type=str, default=ALL, show_default=True, help="Document year.")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice([ALL, "photo", "document"]),
    default=ALL,
    show_default=True,
    help="Entry type.",
)
@click.option("--category", type=str, help="Category name (case-insensitive) or 'Photos'.")
@click.option("--json", "json_output", is_flag=True, help="Emit the grouped view as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def search(
    ctx: click.Context,
    index_source: str | None,
    query: str,
    year: str,
    entry_type: str,
    category: str | None,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Filter the archive index and list matches grouped by document year.

    An index that cannot be loaded is reported as a warning and treated as
    empty; the command still succeeds.
    """

    try:
        config = _load_config({"query.index_source": index_source} if index_source else None)
        quiet_enabled, summary_only = _output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return

    session = ArchiveSession(
        config.query.index_source, timeout=config.query.timeout_seconds
    ).load()
    indexed = sorted({entry.category for entry in session.enriched if entry.category})
    resolved = resolve_category(category, [*config.query.categories, *indexed])
    unknown_category = False
    if category and category.lower() != ALL and resolved == ALL:
        # Keep the filter so an unknown category matches nothing.
        unknown_category = True
        resolved = category
    filters = QueryFilters(search=query, year=year, type=entry_type, category=resolved)
    view = session.view(filters)

    if json_output:
        console.print_json(data=view.as_dict())
        return

    if view.load_error:
        _emit_message(
            f"[yellow]Archive index could not be loaded: {escape(view.load_error)}[/yellow]",
            mode="warning",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    if unknown_category:
        _emit_message(
            f"[yellow]Unknown category '{escape(str(category))}'; nothing is filed under it."
            "[/yellow]",
            mode="warning",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    table = _render_view(view)
    if table is None:
        _emit_message(
            "[yellow]No documents match your search.[/yellow]",
            mode="warning",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    else:
        _emit_message(table, mode="detail", quiet=quiet_enabled, summary_only=summary_only)
    _emit_message(
        _format_summary_line(
            "Search",
            session.source,
            {"matches": view.filtered_count, "total": view.total, "groups": len(view.groups)},
        ),
        mode="summary",
        quiet=quiet_enabled,
        summary_only=summary_only,
    )


@cli.command()
@click.argument("filename")
@click.option("--year", type=str, default="", help="Directory year used as fallback.")
@click.option("--month", type=str, default="", help="Directory month used as fallback.")
@click.option("--json", "json_output", is_flag=True, help="Emit the parse result as JSON.")
def parse(filename: str, year: str, month: str, json_output: bool) -> None:
    """Show which filename rule decides the document date for FILENAME."""

    winner = match_rule(strip_extension(filename))
    payload = {
        "filename": filename,
        "rule": winner[0].name if winner else "fallback",
        "docYear": parse_document_year(filename, year),
        "docDate": parse_document_date(filename, month, year),
        "title": format_title(filename),
    }
    if json_output:
        console.print_json(data=payload)
        return
    for key, value in payload.items():
        console.print(f"[bold]{key}[/bold]: {escape(value)}")


@cli.group()
def config() -> None:
    """Manage archdex configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""

    try:
        effective = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value addressed by a dotted KEY such as archive.root."""

    manager = ConfigManager()
    manager.ensure_exists()

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'archive.root'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    before = manager.read_text().splitlines()
    try:
        file_data = manager.load_file_overrides()
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=ArchdexConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    diff = list(
        difflib.unified_diff(
            before,
            manager.read_text().splitlines(),
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    # The timestamp line always changes; anything beyond it is a real edit.
    changed = [
        line
        for line in diff
        if line[:1] in {"+", "-"}
        and not line.startswith(("+++", "---"))
        and "Last updated" not in line
    ]
    if not changed:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session."""

    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")
    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return
    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=ArchdexConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
