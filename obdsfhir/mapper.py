# obdsfhir/mapper.py
"""Map one batch of report versions to a FHIR transaction bundle.

The mapper owns the parts every resource mapping shares: consolidating the
batch, pseudonymizing identifiers, stamping provenance and bundling the
results.  Which resources a report produces is decided by the caller's
``build_resources`` function, which receives each canonical report together
with the mapper:

    def build_patient(report, mapper):
        pid = get_patient_id(report)
        return [{"resourceType": "Patient",
                 "id": mapper.hash(ResourceKind.PATIENT, pid),
                 "meta": {"source": mapper.meta_source(report)}}]

    result = ReportMapper().map_reports(reports, build_patient)

Errors for a single report (missing fields, bad dates, resources without
an addressable id) are logged and collected, none of that report's
resources are emitted, and the rest of the batch is still mapped; pass ``strict=True``
to let them propagate instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from .accessor import get_report_id, get_sender_id, get_software_id
from .bundle import build_transaction_bundle, generate_profile_meta_source, resource_address
from .config import ObdsFhirConfig, get_config
from .consolidation import prioritise_latest_reports
from .hashing import IdentifierHasher, ResourceKind
from .models import ReportCollection, ReportStructureError, VersionedReport
from .utils.logging import log_mapping_complete

logger = logging.getLogger(__name__)

ResourceBuilder = Callable[[VersionedReport, "ReportMapper"], Iterable[dict[str, Any]]]


@dataclass
class MappingResult:
    """Outcome of mapping one batch."""

    bundle: Optional[dict[str, Any]]
    processed: int = 0
    failed: int = 0
    errors: list[dict[str, str]] = field(default_factory=list)


class ReportMapper:
    """Shared consolidation, hashing and bundling for resource mappings."""

    def __init__(
        self,
        config: Optional[ObdsFhirConfig] = None,
        hasher: Optional[IdentifierHasher] = None,
    ) -> None:
        self.config = config or get_config()
        self.hasher = hasher or IdentifierHasher.from_config(self.config)

    def hash(self, kind: Union[ResourceKind, str], raw_id: str) -> Optional[str]:
        return self.hasher.hash(kind, raw_id)

    def meta_source(self, report: VersionedReport) -> str:
        return generate_profile_meta_source(
            get_sender_id(report),
            get_software_id(report),
            self.config.app_version,
        )

    def map_reports(
        self,
        reports: ReportCollection,
        build_resources: ResourceBuilder,
        priority_order: Optional[Sequence[str]] = None,
        report_filter: Optional[Iterable[str]] = None,
        *,
        strict: bool = False,
    ) -> MappingResult:
        """Consolidate *reports* and bundle the resources built from them.

        Parameters
        ----------
        reports:
            All known versions of the reports in the batch.
        build_resources:
            Called once per canonical report; returns the FHIR resource
            dicts for that report.
        priority_order, report_filter:
            Passed to :func:`prioritise_latest_reports`.  ``None`` falls
            back to ``report_priority`` and ``report_filter`` from config.
        strict:
            Propagate per-report errors instead of collecting them.

        Returns
        -------
        MappingResult
            ``bundle`` is ``None`` when no resources were produced.
        """
        if priority_order is None:
            priority_order = self.config.report_priority
        if report_filter is None:
            report_filter = self.config.report_filter

        canonical = prioritise_latest_reports(
            reports, priority_order, report_filter, strict=strict
        )

        result = MappingResult(bundle=None)
        resources: list[dict[str, Any]] = []
        for report in canonical:
            try:
                built = list(build_resources(report, self))
                for resource in built:
                    resource_address(resource)
            except (ReportStructureError, ValueError) as exc:
                if strict:
                    raise
                report_id = get_report_id(report)
                logger.error("Failed to map report %s: %s", report_id, exc)
                result.failed += 1
                result.errors.append({"report_id": report_id, "error": str(exc)})
                continue
            resources.extend(built)
            result.processed += 1

        if resources:
            result.bundle = build_transaction_bundle(resources)

        log_mapping_complete(logger, result.processed, result.failed, len(resources))
        return result
