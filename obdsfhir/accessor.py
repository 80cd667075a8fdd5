# obdsfhir/accessor.py
"""Field access into the parsed ADT document of a report.

The required fields (patient id, tumor id, report reason, report id) raise
:class:`~obdsfhir.models.ReportStructureError` when absent so that a
malformed record is reported instead of propagating ``None`` into the
mapping.  The sender fields are optional and return ``None``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .models import ReportStructureError, VersionedReport

_PATIENT = ("Menge_Patient", "Patient")
_MELDUNG = _PATIENT + ("Menge_Meldung", "Meldung")

PATIENT_ID_PATH = _PATIENT + ("Patienten_Stammdaten", "Patient_ID")
TUMOR_ID_PATH = _MELDUNG + ("Tumorzuordnung", "Tumor_ID")
REPORT_REASON_PATH = _MELDUNG + ("Meldeanlass",)
REPORT_ID_PATH = _MELDUNG + ("Meldung_ID",)
SENDER_ID_PATH = ("Absender", "Absender_ID")
SOFTWARE_ID_PATH = ("Absender", "Software_ID")


def _lookup(data: Any, path: tuple[str, ...]) -> Optional[str]:
    node = data
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return None
        node = node[key]
    if node is None or isinstance(node, (Mapping, list, tuple)):
        return None
    value = str(node)
    return value if value else None


def _require(report: VersionedReport, path: tuple[str, ...]) -> str:
    value = _lookup(report.xml_data, path)
    if value is None:
        report_id = _lookup(report.xml_data, REPORT_ID_PATH) or report.source_label
        raise ReportStructureError(".".join(path), report_id)
    return value


def get_patient_id(report: VersionedReport) -> str:
    return _require(report, PATIENT_ID_PATH)


def get_tumor_id(report: VersionedReport) -> str:
    return _require(report, TUMOR_ID_PATH)


def get_report_reason(report: VersionedReport) -> str:
    """Return the ``Meldeanlass``, which stays the same across versions of a report."""
    return _require(report, REPORT_REASON_PATH)


def get_report_id(report: VersionedReport) -> str:
    """Return the ``Meldung_ID`` shared by all versions of a logical report."""
    return _require(report, REPORT_ID_PATH)


def get_sender_id(report: VersionedReport) -> Optional[str]:
    return _lookup(report.xml_data, SENDER_ID_PATH)


def get_software_id(report: VersionedReport) -> Optional[str]:
    return _lookup(report.xml_data, SOFTWARE_ID_PATH)
