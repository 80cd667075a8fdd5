"""Shared report factory for the test suite."""

from typing import Any, Optional

import pytest


def build_report(
    report_id: Optional[str] = "FK0000225",
    reason: Optional[str] = "diagnose",
    version: int = 1,
    patient_id: Optional[str] = "1055555550",
    tumor_id: Optional[str] = "1",
    sender_id: Optional[str] = "UKER",
    software_id: Optional[str] = "ONKOSTAR",
    export_id: int = 1,
) -> dict[str, Any]:
    """Return one export row; ``None`` leaves the field out of the document."""
    meldung: dict[str, Any] = {}
    if report_id is not None:
        meldung["Meldung_ID"] = report_id
    if reason is not None:
        meldung["Meldeanlass"] = reason
    if tumor_id is not None:
        meldung["Tumorzuordnung"] = {"Tumor_ID": tumor_id}

    stammdaten = {"Patient_ID": patient_id} if patient_id is not None else {}

    absender: dict[str, Any] = {}
    if sender_id is not None:
        absender["Absender_ID"] = sender_id
    if software_id is not None:
        absender["Software_ID"] = software_id

    return {
        "ID": export_id,
        "REFERENZ_NUMMER": patient_id,
        "LKR_MELDUNG": 225,
        "VERSIONSNUMMER": version,
        "XML_DATEN": {
            "Absender": absender,
            "Menge_Patient": {
                "Patient": {
                    "Patienten_Stammdaten": stammdaten,
                    "Menge_Meldung": {"Meldung": meldung},
                }
            },
        },
    }


@pytest.fixture
def make_report():
    """Factory fixture building ``VersionedReport`` instances."""
    from obdsfhir.models import VersionedReport

    def _make(**kwargs: Any) -> VersionedReport:
        return VersionedReport.model_validate(build_report(**kwargs))

    return _make


@pytest.fixture
def package_log_records():
    """Capture records of the ``obdsfhir`` logger even after setup_logging disabled propagation."""
    import logging

    records: list[logging.LogRecord] = []

    class _ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    handler = _ListHandler(level=logging.DEBUG)
    package_logger = logging.getLogger("obdsfhir")
    package_logger.addHandler(handler)
    try:
        yield records
    finally:
        package_logger.removeHandler(handler)


@pytest.fixture
def make_row():
    """Factory fixture building raw export rows (dicts)."""
    return build_report
