# obdsfhir/consolidation.py
"""Collapse versioned report submissions into the reports to map.

A registry re-submits a report with a higher version number whenever its
content changes, so a batch usually holds several versions of the same
``Meldung_ID``.  :func:`prioritise_latest_reports` keeps the latest version
of each report (optionally restricted to some report reasons) and orders
the survivors by a caller-supplied report-reason priority.
"""

from __future__ import annotations

import logging
import sys
from typing import Iterable, Optional, Sequence

from .accessor import get_report_id, get_report_reason
from .models import CanonicalReportSet, ReportCollection, ReportStructureError, VersionedReport
from .utils.logging import log_consolidation_summary

logger = logging.getLogger(__name__)

_UNRANKED = sys.maxsize


def _rank_index(priority_order: Sequence[str]) -> dict[str, int]:
    ranks: dict[str, int] = {}
    for index, reason in enumerate(priority_order):
        ranks.setdefault(reason, index)
    return ranks


def prioritise_latest_reports(
    reports: ReportCollection,
    priority_order: Sequence[str],
    report_filter: Optional[Iterable[str]] = None,
    *,
    strict: bool = False,
) -> CanonicalReportSet:
    """Return the latest version of each report, ordered by report reason.

    Parameters
    ----------
    reports:
        All known versions of the reports in this batch, in any order.
    priority_order:
        Report reasons in processing order.  Reasons not listed sort
        after every listed one; an empty list keeps first-seen order.
    report_filter:
        Report reasons to keep.  ``None`` keeps all reports.
    strict:
        Re-raise :class:`ReportStructureError` for a report without a
        readable reason or id instead of logging and skipping it.

    Returns
    -------
    list[VersionedReport]
        At most one report per ``Meldung_ID``: the one with the highest
        version number among the reports that passed the filter.
    """
    allowed = None if report_filter is None else set(report_filter)

    latest: dict[str, VersionedReport] = {}
    reasons: dict[str, str] = {}
    skipped = 0

    for report in reports:
        try:
            reason = get_report_reason(report)
            if allowed is not None and reason not in allowed:
                continue
            report_id = get_report_id(report)
        except ReportStructureError as exc:
            if strict:
                raise
            skipped += 1
            logger.error("Skipping malformed report: %s", exc)
            continue

        current = latest.get(report_id)
        if current is None or report.version_number > current.version_number:
            latest[report_id] = report
            reasons[report_id] = reason
        elif report.version_number == current.version_number:
            logger.warning(
                "Report %s has more than one version %d, keeping the first one seen",
                report_id,
                report.version_number,
            )

    ranks = _rank_index(priority_order)
    ordered = sorted(
        latest,
        key=lambda report_id: ranks.get(reasons[report_id], _UNRANKED),
    )

    log_consolidation_summary(logger, total=len(reports), kept=len(ordered), skipped=skipped)
    return [latest[report_id] for report_id in ordered]
