"""Tests for Tunnelgate CLI."""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from tunnelgate.cli import main

VALID_CONFIG = r"""
ingress:
  - hostname: api.example.com
    service: http://localhost:8000
  - hostname: "*.example.com"
    path: /static/.*\.html
    service: http://localhost:8001
  - service: http://localhost:8080
"""

INVALID_CONFIG = """
ingress:
  - hostname: example.com
    service: http://localhost:8000
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(VALID_CONFIG, encoding="utf-8")
    return str(path)


@pytest.fixture
def invalid_config_file(tmp_path):
    path = tmp_path / "invalid.yml"
    path.write_text(INVALID_CONFIG, encoding="utf-8")
    return str(path)


class TestCLIBasics:
    """Basic CLI tests."""

    def test_main_with_help(self):
        """Test --help shows help message."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Tunnelgate" in result.output
        assert "ingress" in result.output

    def test_invalid_log_level_env(self):
        """Test a bad TUNNELGATE_LOG_LEVEL exits with an error."""
        runner = CliRunner()
        with patch.dict(os.environ, {"TUNNELGATE_LOG_LEVEL": "verbose"}):
            result = runner.invoke(main, ["version"])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output

    def test_log_level_option_overrides_env(self):
        """Test --log-level wins over the environment."""
        runner = CliRunner()
        with patch.dict(os.environ, {"TUNNELGATE_LOG_LEVEL": "error"}):
            result = runner.invoke(main, ["--log-level", "debug", "version"])

        assert result.exit_code == 0

    def test_version_command(self):
        """Test version command."""
        runner = CliRunner()
        result = runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert "Version:" in result.output
        assert "Python:" in result.output


class TestValidateCommand:
    """Tests for ingress validate."""

    def test_valid_config(self, config_file):
        """Test a valid config prints the rules and OK."""
        runner = CliRunner()
        result = runner.invoke(main, ["ingress", "validate", "--config", config_file])

        assert result.exit_code == 0
        assert "OK" in result.output
        assert "api.example.com" in result.output

    def test_json_output(self, config_file):
        """Test --json prints the compiled table."""
        runner = CliRunner()
        result = runner.invoke(
            main, ["ingress", "validate", "--config", config_file, "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [r["service"] for r in data["ingress"]] == [
            "http://localhost:8000",
            "http://localhost:8001",
            "http://localhost:8080",
        ]
        assert data["ingress"][1]["path"] == r"/static/.*\.html"

    def test_invalid_config(self, invalid_config_file):
        """Test an invalid config exits with an error."""
        runner = CliRunner()
        result = runner.invoke(
            main, ["ingress", "validate", "--config", invalid_config_file]
        )

        assert result.exit_code == 1
        assert "Validation failed" in result.output

    def test_missing_file(self, tmp_path):
        """Test a missing file exits with an error."""
        runner = CliRunner()
        result = runner.invoke(
            main, ["ingress", "validate", "--config", str(tmp_path / "nope.yml")]
        )

        assert result.exit_code == 1
        assert "Failed to load config" in result.output

    def test_config_is_directory(self, tmp_path):
        """Test a directory passed as the config exits with an error."""
        runner = CliRunner()
        result = runner.invoke(main, ["ingress", "validate", "--config", str(tmp_path)])

        assert result.exit_code == 1
        assert "Failed to load config" in result.output

    def test_no_config_given(self):
        """Test running without a config file exits with an error."""
        runner = CliRunner()
        with patch.dict(os.environ, {}, clear=True):
            result = runner.invoke(main, ["ingress", "validate"])

        assert result.exit_code == 1
        assert "No config file given" in result.output

    def test_config_from_env(self, config_file):
        """Test TUNNELGATE_INGRESS_FILE supplies the default config."""
        runner = CliRunner()
        with patch.dict(os.environ, {"TUNNELGATE_INGRESS_FILE": config_file}):
            result = runner.invoke(main, ["ingress", "validate"])

        assert result.exit_code == 0
        assert "OK" in result.output


class TestRuleCommand:
    """Tests for ingress rule."""

    def test_matches_first_rule(self, config_file):
        """Test a URL matching the first rule."""
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["ingress", "rule", "https://api.example.com/users", "--config", config_file],
        )

        assert result.exit_code == 0
        assert "Matched rule #1" in result.output
        assert "http://localhost:8000" in result.output

    def test_matches_path_rule(self, config_file):
        """Test a URL matching the wildcard rule with a path."""
        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "ingress",
                "rule",
                "https://www.example.com/static/index.html",
                "--config",
                config_file,
            ],
        )

        assert result.exit_code == 0
        assert "Matched rule #2" in result.output

    def test_falls_through_to_catch_all(self, config_file):
        """Test an unmatched URL reaches the catch-all."""
        runner = CliRunner()
        result = runner.invoke(
            main, ["ingress", "rule", "https://other.org/", "--config", config_file]
        )

        assert result.exit_code == 0
        assert "Matched rule #3" in result.output

    def test_relative_url(self, config_file):
        """Test a URL without a host is rejected."""
        runner = CliRunner()
        result = runner.invoke(
            main, ["ingress", "rule", "/just/a/path", "--config", config_file]
        )

        assert result.exit_code == 1
        assert "not an absolute URL" in result.output

    def test_verbose_flag(self, config_file):
        """Test --verbose is accepted before the subcommand."""
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["--verbose", "ingress", "rule", "https://api.example.com/", "-c", config_file],
        )

        assert result.exit_code == 0
