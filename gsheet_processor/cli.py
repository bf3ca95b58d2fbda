"""Typer based command line entry points for gsheet_processor."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from gsheet_processor.core.errors import ConfigError, GSheetError
from gsheet_processor.core.logger import get_logger
from gsheet_processor.core.pipeline import ProcessorOptions, fetch_records
from gsheet_processor.core.profiles import load_profiles
from gsheet_processor.services.records.exporter import export_records, record_columns
from gsheet_processor.services.records.models import Record
from gsheet_processor.services.sheets.config import resolve_config

OUTPUT_FORMATS = {"json", "table"}
OPERATORS = {"and", "or"}
MATCHING_MODES = {"strict", "loose"}

app = typer.Typer(help="Read public Google Sheets as filtered records.")


def _handle_error(exc: Exception) -> None:
    get_logger().error("gsheet operation failed: %s", exc, exc_info=True)
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _parse_filters(values: List[str]) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for item in values:
        field, sep, expected = item.partition("=")
        if not sep or not field.strip():
            raise typer.BadParameter(f"filter must look like FIELD=VALUE: {item}")
        parsed[field.strip()] = expected
    return parsed


def _validate_choice(value: Optional[str], allowed: set[str], name: str) -> Optional[str]:
    if value is None:
        return None
    value = value.lower()
    if value not in allowed:
        raise typer.BadParameter(f"{name} must be one of {', '.join(sorted(allowed))}")
    return value


def _format_table(records: List[Record]) -> str:
    columns = record_columns(records)
    if not columns:
        return "<empty>"
    widths = {col: len(col) for col in columns}
    for record in records:
        for col in columns:
            widths[col] = max(widths[col], len(str(record.get(col, ""))))
    lines = [
        "  ".join(col.ljust(widths[col]) for col in columns),
        "  ".join("-" * widths[col] for col in columns),
    ]
    for record in records:
        lines.append("  ".join(str(record.get(col, "")).ljust(widths[col]) for col in columns))
    return "\n".join(line.rstrip() for line in lines)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    logger = get_logger()
    level_value = getattr(logging, log_level.upper(), None)
    if not isinstance(level_value, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")
    logger.setLevel(level_value)


@app.command("fetch")
def cmd_fetch(
    profile: Optional[str] = typer.Option(None, "--profile", help="Sheets profile name in profiles.yaml"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Alternate profiles.yaml path"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Google Sheets API key"),
    sheet_id: Optional[str] = typer.Option(None, "--sheet-id", help="Spreadsheet id"),
    sheet_name: Optional[str] = typer.Option(None, "--sheet-name", help="Sheet (tab) name"),
    sheet_number: Optional[int] = typer.Option(None, "--sheet-number", help="Use Sheet<N> when no name is given"),
    filters: List[str] = typer.Option([], "--filter", help="FIELD=VALUE, repeatable"),
    operator: Optional[str] = typer.Option(None, "--operator", help="Combine filters with 'and' or 'or'"),
    matching: Optional[str] = typer.Option(None, "--matching", help="'strict' or 'loose' (default loose)"),
    return_all: bool = typer.Option(False, "--all", help="Ignore filters and return every record"),
    output_format: str = typer.Option("json", "--format", help="json or table"),
    out: Optional[Path] = typer.Option(None, "--out", help="Also write records to a .csv or .xlsx file"),
) -> None:
    """Fetch a sheet and print its records."""

    output_format = _validate_choice(output_format, OUTPUT_FORMATS, "format") or "json"
    operator = _validate_choice(operator, OPERATORS, "operator")
    matching = _validate_choice(matching, MATCHING_MODES, "matching")
    cli_filter = _parse_filters(filters)
    if cli_filter and operator is None:
        raise typer.BadParameter("--operator is required with --filter")

    try:
        raw_profile: Dict[str, Any] = {}
        profiles = None
        if profile:
            profiles = load_profiles(config_path)
            if profile not in profiles:
                raise ConfigError(f"sheets profile '{profile}' not found in profiles.yaml")
            raw_profile = dict(profiles[profile])
        config = resolve_config(
            profile,
            config_path=config_path,
            profiles=profiles,
            api_key=api_key,
            sheet_id=sheet_id,
            sheet_name=sheet_name,
            sheet_number=sheet_number,
        )
        filter_options = dict(raw_profile.get("filter_options") or {})
        if operator:
            filter_options["operator"] = operator
        if matching:
            filter_options["matching"] = matching
        options = ProcessorOptions(
            api_key=config.api_key,
            sheet_id=config.sheet_id,
            sheet_name=config.sheet_name,
            sheet_number=config.sheet_number,
            timeout_sec=config.timeout_sec,
            base_url=config.base_url,
            return_all_results=return_all,
            filter=cli_filter or raw_profile.get("filter"),
            filter_options=filter_options or None,
        )
        records = fetch_records(options)
        if out is not None:
            written = export_records(records, out)
            typer.secho(f"Wrote {len(records)} records to {written}", err=True)
    except GSheetError as exc:
        _handle_error(exc)
    else:
        if output_format == "table":
            typer.echo(_format_table(records))
        else:
            typer.echo(json.dumps(records, ensure_ascii=False, indent=2))


@app.command("profiles")
def cmd_profiles(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Alternate profiles.yaml path"),
) -> None:
    """List configured sheets profiles."""

    try:
        profiles = load_profiles(config_path)
    except GSheetError as exc:
        _handle_error(exc)
    else:
        for name in profiles:
            typer.echo(name)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
