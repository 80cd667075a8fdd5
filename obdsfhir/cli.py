# obdsfhir/cli.py
"""
obdsfhir CLI -- Click commands with a rich terminal UI.

Provides the ``obdsfhir`` console entry-point declared in pyproject.toml as
``obdsfhir.cli:cli``.  Commands call into the mapping modules:

- consolidate:    prioritise_latest_reports on an export file
- hash:           IdentifierHasher pseudonym for one identifier
- normalize-date: normalize_adt_date for one ADT date
- convert-id:     convert_id for one identifier
- config:         ObdsFhirConfig display
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from . import __version__
from . import cli_theme as theme
from .config import get_config

console = Console()


def _print_version(
    ctx: click.Context,
    _param: click.Parameter,
    value: bool,
) -> None:
    if not value or ctx.resilient_parsing:
        return
    theme.print_version(__version__, console)
    ctx.exit()


# ---------------------------------------------------------------------------
# Main CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for the session log file (default: OBDSFHIR_LOG_LEVEL or INFO).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Also log to stderr.")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], verbose: bool) -> None:
    """obds-to-fhir -- consolidate registry reports and map them to FHIR."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    from .utils.logging import setup_logging

    cfg = get_config()
    log_dir = None if os.getenv("OBDSFHIR_LOG_DIR") else cfg.log_dir
    setup_logging(level=log_level, log_dir=log_dir, console_output=verbose)
    theme.print_banner(__version__, console)


# ---------------------------------------------------------------------------
# consolidate
# ---------------------------------------------------------------------------


def _save_reports(reports: list, output: Path) -> Path:
    data = [report.model_dump(by_alias=True) for report in reports]
    suffix = output.suffix.lower()
    output.parent.mkdir(parents=True, exist_ok=True)
    if suffix in (".yaml", ".yml"):
        import yaml

        output.write_text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        return output
    if not suffix:
        output = output.with_suffix(".json")
    output.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return output


@cli.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--priority",
    "priority",
    multiple=True,
    help="Report reason in processing order; repeat for each reason (default: config report_priority).",
)
@click.option(
    "--filter",
    "report_filter",
    multiple=True,
    help="Only keep reports with this reason; repeatable (default: config report_filter).",
)
@click.option("--strict", is_flag=True, default=False, help="Fail on the first malformed report instead of skipping it.")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Save the canonical reports to a .json or .yaml file.")
def consolidate(
    input_path: Path,
    priority: tuple[str, ...],
    report_filter: tuple[str, ...],
    strict: bool,
    output: Optional[Path],
) -> None:
    """Keep the latest version of each report and order them by reason.

    \b
    INPUT is a .json or .jsonl file of report export rows.

    \b
    Examples:
      obdsfhir consolidate reports.json
      obdsfhir consolidate reports.jsonl --priority diagnose --priority behandlungsende
      obdsfhir consolidate reports.json --filter diagnose -o canonical.json
    """
    from .accessor import get_report_id, get_report_reason
    from .consolidation import prioritise_latest_reports
    from .loader import ReportLoadError, load_reports
    from .models import ReportStructureError
    from .utils.logging import get_logger

    logger = get_logger(__name__)
    cfg = get_config()
    priority_order = list(priority) if priority else cfg.report_priority
    filter_set = list(report_filter) if report_filter else cfg.report_filter

    try:
        reports = load_reports(input_path)
    except ReportLoadError as exc:
        raise click.ClickException(str(exc))

    logger.info(f"Loaded {len(reports)} report version(s) from {input_path}")
    console.print(theme.info(f"Loaded {len(reports)} report version(s) from {input_path.name}"))

    try:
        canonical = prioritise_latest_reports(reports, priority_order, filter_set, strict=strict)
    except ReportStructureError as exc:
        raise click.ClickException(str(exc))

    theme.section("Canonical reports", console)
    table = theme.make_table()
    table.add_column("#", justify="right")
    table.add_column("Meldung_ID")
    table.add_column("Reason")
    table.add_column("Version", justify="right")
    for index, report in enumerate(canonical, start=1):
        table.add_row(
            str(index),
            get_report_id(report),
            get_report_reason(report),
            str(report.version_number),
        )
    console.print(table)
    console.print(theme.ok(f"{len(canonical)} canonical report(s)"))

    if output is not None:
        saved = _save_reports(canonical, output)
        console.print(theme.ok(f"Saved to {saved}"))


# ---------------------------------------------------------------------------
# hash / convert-id / normalize-date
# ---------------------------------------------------------------------------


@cli.command(name="hash")
@click.argument("kind")
@click.argument("raw_id")
def hash_command(kind: str, raw_id: str) -> None:
    """Print the pseudonym of RAW_ID for resource KIND (e.g. Patient, Surrogate)."""
    from .hashing import IdentifierHasher, ResourceKind

    resource_kind = ResourceKind.parse(kind)
    hasher = IdentifierHasher.from_config(get_config())
    try:
        pseudonym = hasher.hash(resource_kind, raw_id)
    except ValueError as exc:
        raise click.ClickException(str(exc))

    if pseudonym is None:
        console.print(theme.warn(f"No pseudonym for unknown resource kind {kind!r}"))
        return
    console.print(theme.info(resource_kind.value))
    console.print(pseudonym)


@cli.command(name="convert-id")
@click.argument("identifier")
def convert_id_command(identifier: str) -> None:
    """Extract the 9-digit identifier from IDENTIFIER."""
    from .hashing import convert_id

    console.print(convert_id(identifier))


@cli.command(name="normalize-date")
@click.argument("value")
def normalize_date_command(value: str) -> None:
    """Normalize an ADT date (DD.MM.YYYY, 00 for unknown parts)."""
    from .dates import AdtDateFormatError, normalize_adt_date

    try:
        normalized = normalize_adt_date(value)
    except AdtDateFormatError as exc:
        raise click.ClickException(str(exc))

    if normalized is None:
        console.print(theme.warn("No date given"))
        return
    console.print(normalized.to_fhir())


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.command(name="config")
def config_command() -> None:
    """Show the active configuration."""
    cfg = get_config()
    theme.section("Configuration", console)
    table = theme.make_kv_table()
    for key, value in cfg.model_dump().items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        table.add_row(key, "-" if value is None else str(value))
    table.add_row("log_dir", str(cfg.log_dir))
    console.print(table)
