"""Tests for configuration loading from environment variables."""

from __future__ import annotations

import os
from unittest.mock import patch

import pydantic
import pytest

from tunnelgate.core.config import (
    RouterSettings,
    clear_config,
    get_config,
    load_ingress_document,
)


class TestRouterSettings:
    """Test RouterSettings settings."""

    def test_default_values(self, monkeypatch, tmp_path):
        """Test default values."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("TUNNELGATE_INGRESS_FILE", raising=False)
        monkeypatch.delenv("TUNNELGATE_LOG_LEVEL", raising=False)
        config = RouterSettings()
        assert config.ingress_file is None
        assert config.log_level == "warning"

    def test_env_override_ingress_file(self):
        """Test TUNNELGATE_INGRESS_FILE env var."""
        with patch.dict(os.environ, {"TUNNELGATE_INGRESS_FILE": "/etc/tunnelgate/config.yml"}):
            config = RouterSettings()
            assert config.ingress_file == "/etc/tunnelgate/config.yml"

    def test_env_override_log_level(self):
        """Test TUNNELGATE_LOG_LEVEL env var."""
        with patch.dict(os.environ, {"TUNNELGATE_LOG_LEVEL": "debug"}):
            config = RouterSettings()
            assert config.log_level == "debug"

    def test_env_rejects_unknown_log_level(self):
        """Test an unknown TUNNELGATE_LOG_LEVEL is rejected."""
        with patch.dict(os.environ, {"TUNNELGATE_LOG_LEVEL": "verbose"}):
            with pytest.raises(pydantic.ValidationError):
                RouterSettings()


class TestGetConfig:
    """Test get_config caching."""

    def test_cached(self):
        """Test the same instance is returned until cleared."""
        first = get_config()
        assert get_config() is first
        clear_config()
        assert get_config() is not first


class TestLoadIngressDocument:
    """Test reading config files."""

    def test_reads_file(self, tmp_path):
        """Test the file text is returned."""
        path = tmp_path / "config.yml"
        path.write_text("ingress:\n  - service: http://localhost:8000\n", encoding="utf-8")
        assert load_ingress_document(path).startswith("ingress:")

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_ingress_document(tmp_path / "missing.yml")

    def test_bad_encoding(self, tmp_path):
        """Test non-UTF-8 content raises ValueError."""
        path = tmp_path / "config.yml"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(ValueError):
            load_ingress_document(path)
