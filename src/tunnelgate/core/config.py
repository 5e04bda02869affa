"""Configuration types with environment variable support.

All settings can be configured via environment variables with the TUNNELGATE_ prefix.
Example: TUNNELGATE_INGRESS_FILE=/etc/tunnelgate/config.yml sets ingress_file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def load_ingress_document(path: str | Path) -> str:
    """Read a YAML configuration document from disk.

    Args:
        path: Path to the configuration file.

    Returns:
        The document text, ready for parse_ingress().

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file isn't valid UTF-8
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"Config file encoding error in {path}: {e}") from e


class RouterSettings(BaseSettings):
    """Settings for the tunnelgate command line tools.

    All settings can be overridden via environment variables:
    - TUNNELGATE_INGRESS_FILE: Default ingress config file
    - TUNNELGATE_LOG_LEVEL: Log level (debug, info, warning, error)
    """

    model_config = SettingsConfigDict(
        env_prefix="TUNNELGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ingress_file: str | None = Field(
        default=None,
        description="Path to the YAML file holding the ingress rules.",
    )
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="warning",
        description="Log level: debug, info, warning or error.",
    )


_config: RouterSettings | None = None


def get_config() -> RouterSettings:
    """Get the global settings instance.

    Returns a cached instance of RouterSettings that reads from environment variables.
    To reload settings (e.g., in tests), call clear_config() first.
    """
    global _config
    if _config is None:
        _config = RouterSettings()
    return _config


def clear_config() -> None:
    """Clear the cached settings.

    Call this to force reloading of environment variables on next get_config() call.
    """
    global _config
    _config = None
