# tests/test_logging.py
"""Tests for session logging setup."""

import logging


class TestSetupLogging:
    def test_creates_session_log_file(self, tmp_path):
        from obdsfhir.utils.logging import get_current_log_file, get_session_id, setup_logging

        log_file = setup_logging(level="DEBUG", log_dir=tmp_path)
        assert log_file.exists()
        assert log_file == get_current_log_file()
        assert get_session_id() in log_file.name
        assert (tmp_path / "obdsfhir.log").is_symlink()

    def test_records_written_with_session_id(self, tmp_path):
        from obdsfhir.utils.logging import get_logger, get_session_id, setup_logging

        log_file = setup_logging(level="INFO", log_dir=tmp_path)
        get_logger("consolidation").warning("duplicate version")
        for handler in logging.getLogger("obdsfhir").handlers:
            handler.flush()
        content = log_file.read_text(encoding="utf-8")
        assert "duplicate version" in content
        assert get_session_id() in content

    def test_get_logger_namespaces_under_package(self, tmp_path, monkeypatch):
        from obdsfhir.utils.logging import get_logger

        monkeypatch.setenv("OBDSFHIR_LOG_DIR", str(tmp_path))
        assert get_logger("obdsfhir.mapper").name == "obdsfhir.mapper"
        assert get_logger("custom").name == "obdsfhir.custom"

    def test_log_dir_from_environment(self, tmp_path, monkeypatch):
        from obdsfhir.utils.logging import get_log_directory

        monkeypatch.setenv("OBDSFHIR_LOG_DIR", str(tmp_path))
        assert get_log_directory() == tmp_path
