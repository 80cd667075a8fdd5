"""
obds-to-fhir - consolidation and FHIR mapping of oncology registry reports

Main Components:
    - obdsfhir.consolidation: latest-version selection and report-reason ordering
    - obdsfhir.hashing: salted identifier pseudonyms
    - obdsfhir.dates: tolerant ADT date parsing
    - obdsfhir.bundle: idempotent FHIR transaction bundles
    - obdsfhir.mapper: batch driver tying the above together
"""

__version__ = "0.1.0"

from .bundle import build_transaction_bundle, generate_profile_meta_source
from .consolidation import prioritise_latest_reports
from .dates import AdtDateFormatError, DayPrecisionDateTime, normalize_adt_date
from .hashing import IdentifierHasher, ResourceKind, convert_id
from .mapper import MappingResult, ReportMapper
from .models import ReportStructureError, VersionedReport

__all__ = [
    "AdtDateFormatError",
    "DayPrecisionDateTime",
    "IdentifierHasher",
    "MappingResult",
    "ReportMapper",
    "ReportStructureError",
    "ResourceKind",
    "VersionedReport",
    "build_transaction_bundle",
    "convert_id",
    "generate_profile_meta_source",
    "normalize_adt_date",
    "prioritise_latest_reports",
]
