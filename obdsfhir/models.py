"""Data models for versioned registry report exports."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class ReportStructureError(Exception):
    """A report lacks a field every valid report carries."""

    def __init__(self, field: str, report_id: Optional[str] = None) -> None:
        self.field = field
        self.report_id = report_id
        location = f"report {report_id}" if report_id else "report"
        super().__init__(f"Required field {field!r} is missing in {location}")


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class VersionedReport(BaseModel):
    """One submitted version of a registry report (one export row).

    ``xml_data`` holds the ADT document already parsed into nested
    mappings, stored read-only (mappings become ``MappingProxyType``,
    lists become tuples).  Superseding information arrives as a new
    instance with the same ``Meldung_ID`` and a higher ``version_number``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: Optional[int] = Field(default=None, alias="ID")
    reference_number: Optional[str] = Field(default=None, alias="REFERENZ_NUMMER")
    lkr_report: Optional[int] = Field(default=None, alias="LKR_MELDUNG")
    version_number: int = Field(alias="VERSIONSNUMMER", ge=0)
    xml_data: Mapping[str, Any] = Field(alias="XML_DATEN")

    @field_validator("xml_data", mode="after")
    @classmethod
    def _freeze_xml_data(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)

    @field_serializer("xml_data")
    def _serialize_xml_data(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(value)

    @property
    def source_label(self) -> Optional[str]:
        """Best available locator for log messages when the report id is unreadable."""
        if self.lkr_report is not None:
            return f"LKR_MELDUNG={self.lkr_report}"
        if self.id is not None:
            return f"ID={self.id}"
        return None


ReportCollection = Sequence[VersionedReport]
CanonicalReportSet = list[VersionedReport]
