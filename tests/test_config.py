# tests/test_config.py
"""Tests for ObdsFhirConfig, the Pydantic Settings single source of truth."""

from pathlib import Path


class TestObdsFhirConfig:
    def test_default_values(self, monkeypatch):
        from obdsfhir.config import ObdsFhirConfig

        monkeypatch.delenv("OBDSFHIR_REPORT_FILTER", raising=False)
        monkeypatch.delenv("OBDSFHIR_REPORT_PRIORITY", raising=False)
        cfg = ObdsFhirConfig()
        assert cfg.report_priority == []
        assert cfg.report_filter is None
        assert cfg.patient_id_system.endswith("/patient-id")

    def test_env_override(self, monkeypatch):
        from obdsfhir.config import ObdsFhirConfig

        monkeypatch.setenv("OBDSFHIR_APP_VERSION", "2.1.0")
        monkeypatch.setenv("OBDSFHIR_PATIENT_ID_SYSTEM", "urn:test:patient")
        monkeypatch.setenv("OBDSFHIR_REPORT_PRIORITY", '["behandlungsende", "diagnose"]')
        cfg = ObdsFhirConfig()
        assert cfg.app_version == "2.1.0"
        assert cfg.patient_id_system == "urn:test:patient"
        assert cfg.report_priority == ["behandlungsende", "diagnose"]

    def test_salts_are_distinct_by_default(self):
        from obdsfhir.config import ObdsFhirConfig

        cfg = ObdsFhirConfig()
        systems = {
            cfg.patient_id_system,
            cfg.condition_id_system,
            cfg.observation_id_system,
            cfg.medication_statement_id_system,
            cfg.procedure_id_system,
        }
        assert len(systems) == 5

    def test_home_dir_default(self, monkeypatch):
        from obdsfhir.config import ObdsFhirConfig

        monkeypatch.delenv("OBDSFHIR_HOME_DIR", raising=False)
        cfg = ObdsFhirConfig()
        assert cfg.home_dir == Path.home() / ".obdsfhir"
        assert cfg.log_dir == cfg.home_dir / "logs"

    def test_get_config_singleton(self):
        from obdsfhir.config import get_config

        assert get_config() is get_config()
