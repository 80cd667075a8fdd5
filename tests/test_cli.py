# tests/test_cli.py
"""Tests for the obdsfhir CLI."""

import json

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path, monkeypatch):
    monkeypatch.setenv("OBDSFHIR_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def export_file(tmp_path, make_row):
    path = tmp_path / "reports.json"
    path.write_text(
        json.dumps(
            [
                make_row(report_id="FK0000225", reason="diagnose", version=1),
                make_row(report_id="FK0000225", reason="diagnose", version=2),
                make_row(report_id="FK0000226", reason="behandlungsende", version=1),
            ]
        )
    )
    return path


class TestCLISkeleton:
    def test_cli_group_exists(self):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0

    @pytest.mark.parametrize("command", ["consolidate", "hash", "normalize-date", "convert-id", "config"])
    def test_command_registered(self, command):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, [command, "--help"])
        assert result.exit_code == 0

    def test_version_flag(self):
        from obdsfhir import __version__
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestConsolidateCommand:
    def test_consolidate_table(self, export_file):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(
            cli, ["consolidate", str(export_file), "--priority", "behandlungsende", "--priority", "diagnose"]
        )
        assert result.exit_code == 0, result.output
        assert "FK0000226" in result.output
        assert result.output.index("FK0000226") < result.output.index("FK0000225")
        assert "2 canonical report(s)" in result.output

    def test_consolidate_output_json(self, export_file, tmp_path):
        from obdsfhir.cli import cli

        out = tmp_path / "canonical.json"
        result = CliRunner().invoke(cli, ["consolidate", str(export_file), "--filter", "diagnose", "-o", str(out)])
        assert result.exit_code == 0, result.output
        saved = json.loads(out.read_text())
        assert len(saved) == 1
        assert saved[0]["VERSIONSNUMMER"] == 2

    def test_consolidate_output_yaml(self, export_file, tmp_path):
        import yaml

        from obdsfhir.cli import cli

        out = tmp_path / "canonical.yaml"
        result = CliRunner().invoke(cli, ["consolidate", str(export_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert len(yaml.safe_load(out.read_text())) == 2

    def test_consolidate_bad_file(self, tmp_path):
        from obdsfhir.cli import cli

        path = tmp_path / "bad.json"
        path.write_text("{")
        result = CliRunner().invoke(cli, ["consolidate", str(path)])
        assert result.exit_code != 0
        assert "invalid JSON" in result.output

    def test_consolidate_strict_fails_on_malformed(self, tmp_path, make_row):
        from obdsfhir.cli import cli

        path = tmp_path / "reports.json"
        path.write_text(json.dumps([make_row(reason=None)]))
        result = CliRunner().invoke(cli, ["consolidate", str(path), "--strict"])
        assert result.exit_code != 0
        assert "Meldeanlass" in result.output


class TestUtilityCommands:
    def test_hash_surrogate(self):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, ["hash", "Surrogate", "1055555550"])
        assert result.exit_code == 0
        assert "f70bcb03c014ed83e572ae4377c137f0130a5d3327bfc653038627d03035dc6a" in result.output

    def test_hash_unknown_kind(self):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, ["hash", "Encounter", "X"])
        assert result.exit_code == 0
        assert "No pseudonym" in result.output

    def test_normalize_date(self):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, ["normalize-date", "00.04.2022"])
        assert result.exit_code == 0
        assert "2022-04-15" in result.output

    def test_normalize_date_invalid(self):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, ["normalize-date", "31.02.2021"])
        assert result.exit_code != 0
        assert "31.02.2021" in result.output

    def test_convert_id(self):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, ["convert-id", "0000123456789"])
        assert result.exit_code == 0
        assert "123456789" in result.output

    def test_config_command(self):
        from obdsfhir.cli import cli

        result = CliRunner().invoke(cli, ["config"])
        assert result.exit_code == 0
        assert "patient_id_system" in result.output
