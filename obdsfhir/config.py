# obdsfhir/config.py
"""
obds-to-fhir Configuration: single source of truth via Pydantic Settings.

Resolution order: CLI flags > env vars (OBDSFHIR_*) > config file > defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ObdsFhirConfig(BaseSettings):
    """Central configuration for the oBDS to FHIR mapping."""

    model_config = SettingsConfigDict(
        env_prefix="OBDSFHIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Identifier systems ---
    # Each system URL doubles as the pseudonymization salt for its resource kind.
    patient_id_system: str = "https://fhir.diz.uk-erlangen.de/identifiers/patient-id"
    condition_id_system: str = "https://fhir.diz.uk-erlangen.de/identifiers/onkostar-condition-id"
    observation_id_system: str = "https://fhir.diz.uk-erlangen.de/identifiers/onkostar-observation-id"
    medication_statement_id_system: str = (
        "https://fhir.diz.uk-erlangen.de/identifiers/onkostar-medication-statement-id"
    )
    procedure_id_system: str = "https://fhir.diz.uk-erlangen.de/identifiers/onkostar-procedure-id"

    # --- Provenance ---
    app_version: str = "0.0.0-dev"

    # --- Consolidation ---
    # Report reasons in processing order; unlisted reasons sort last.
    report_priority: list[str] = Field(default_factory=list)
    # None keeps every report reason.
    report_filter: Optional[list[str]] = None

    # --- Paths ---
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".obdsfhir")

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"


@lru_cache(maxsize=1)
def get_config() -> ObdsFhirConfig:
    """Return the global config singleton."""
    return ObdsFhirConfig()
