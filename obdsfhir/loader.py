"""Load report export rows from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import VersionedReport


class ReportLoadError(ValueError):
    """A report export file could not be read into reports."""


def load_reports(path: Path | str) -> list[VersionedReport]:
    """Load the report versions stored in *path*.

    Supported formats:
    - .json -> a list of export rows, or an object with an ``elements`` list
    - .jsonl -> one export row per line

    Each row uses the export column names (``ID``, ``REFERENZ_NUMMER``,
    ``LKR_MELDUNG``, ``VERSIONSNUMMER``, ``XML_DATEN``) with ``XML_DATEN``
    already parsed into nested objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".jsonl":
        rows = _read_jsonl(path)
    elif suffix == ".json":
        rows = _read_json(path)
    else:
        raise ReportLoadError(f"{path.name}: unsupported format {suffix or '(none)'}, expected .json or .jsonl")

    reports: list[VersionedReport] = []
    for index, row in enumerate(rows):
        try:
            reports.append(VersionedReport.model_validate(row))
        except ValidationError as exc:
            raise ReportLoadError(f"{path.name}: row {index} is not a valid report export: {exc}") from exc
    return reports


def _read_json(path: Path) -> list[Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ReportLoadError(f"{path.name}: invalid JSON: {exc}") from exc
    if isinstance(data, dict) and "elements" in data:
        data = data["elements"]
    if not isinstance(data, list):
        raise ReportLoadError(f"{path.name}: expected a list of report exports")
    return data


def _read_jsonl(path: Path) -> list[Any]:
    rows: list[Any] = []
    for line_no, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise ReportLoadError(f"{path.name}: invalid JSON on line {line_no}: {exc}") from exc
    return rows
