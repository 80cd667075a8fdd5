# obdsfhir/hashing.py
"""Deterministic pseudonymization of clinical identifiers.

Every output resource id is derived from a source identifier with a salted
SHA-256 digest, so re-processing the same report always yields the same
resource id and the raw identifier never leaves the mapping.

Key components:
    - ResourceKind: closed enumeration of the resource kinds that can be
      hashed, including ``SURROGATE`` (unsalted) and ``UNKNOWN`` (no hash).
    - IdentifierHasher: salt lookup plus digest.
    - convert_id: best-effort extraction of a 9-digit identifier.
"""

from __future__ import annotations

import hashlib
import logging
import re
from enum import Enum
from typing import TYPE_CHECKING, Mapping, Optional, Union

if TYPE_CHECKING:
    from .config import ObdsFhirConfig

logger = logging.getLogger(__name__)

# 9 digits, the first of which is not a zero
_CONVERTIBLE_ID = re.compile(r"[^0]\d{8}")


class ResourceKind(str, Enum):
    """Resource kinds with their own pseudonym namespace."""

    PATIENT = "Patient"
    CONDITION = "Condition"
    OBSERVATION = "Observation"
    MEDICATION_STATEMENT = "MedicationStatement"
    PROCEDURE = "Procedure"
    SURROGATE = "Surrogate"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, name: Union[str, "ResourceKind"]) -> "ResourceKind":
        """Map a resource type name to a kind, ``UNKNOWN`` if unrecognized.

        Accepts the FHIR type name (``MedicationStatement``), the member
        name (``MEDICATION_STATEMENT``) and kebab case
        (``medication-statement``), case-insensitively.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().replace("-", "").replace("_", "").lower()
        for kind in cls:
            if kind.value.lower() == key:
                return kind
        return cls.UNKNOWN


_SALTED_KINDS = (
    ResourceKind.PATIENT,
    ResourceKind.CONDITION,
    ResourceKind.OBSERVATION,
    ResourceKind.MEDICATION_STATEMENT,
    ResourceKind.PROCEDURE,
)


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class IdentifierHasher:
    """Salted SHA-256 pseudonyms, one salt per resource kind.

    Parameters
    ----------
    salts:
        Mapping from resource kind to its salt string.  Kinds without a
        salt hash to ``None``, the same as ``ResourceKind.UNKNOWN``.
    """

    def __init__(self, salts: Mapping[ResourceKind, str]) -> None:
        self._salts = {kind: salts[kind] for kind in _SALTED_KINDS if kind in salts}

    @classmethod
    def from_config(cls, config: "ObdsFhirConfig") -> "IdentifierHasher":
        """Build a hasher from the configured identifier systems."""
        return cls(
            {
                ResourceKind.PATIENT: config.patient_id_system,
                ResourceKind.CONDITION: config.condition_id_system,
                ResourceKind.OBSERVATION: config.observation_id_system,
                ResourceKind.MEDICATION_STATEMENT: config.medication_statement_id_system,
                ResourceKind.PROCEDURE: config.procedure_id_system,
            }
        )

    def hash(self, kind: Union[ResourceKind, str], raw_id: str) -> Optional[str]:
        """Return the pseudonym of *raw_id* within *kind*.

        ``SURROGATE`` is digested without a salt.  ``UNKNOWN`` kinds
        return ``None`` and callers must branch on it.

        Raises
        ------
        ValueError
            If *raw_id* is empty.
        """
        kind = ResourceKind.parse(kind)
        if not raw_id:
            raise ValueError(f"Cannot hash an empty {kind.value} identifier")
        if kind is ResourceKind.SURROGATE:
            return _sha256_hex(raw_id)
        salt = self._salts.get(kind)
        if salt is None:
            return None
        return _sha256_hex(f"{salt}|{raw_id}")

    def hash_surrogate(self, raw_id: str) -> str:
        """Return the unsalted pseudonym of *raw_id*."""
        if not raw_id:
            raise ValueError("Cannot hash an empty surrogate identifier")
        return _sha256_hex(raw_id)


def convert_id(identifier: str) -> str:
    """Extract the first 9-digit run not starting with ``0`` from *identifier*.

    Identifiers without such a run are returned unchanged and a warning
    is logged; the caller can keep working with the original value.
    """
    match = _CONVERTIBLE_ID.search(identifier)
    if match is None:
        logger.warning(
            "Identifier to convert does not have 9 digits without leading '0': %s",
            identifier,
        )
        return identifier
    return match.group()
