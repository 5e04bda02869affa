"""Core."""

from .config import RouterSettings, clear_config, get_config, load_ingress_document

__all__ = [
    "RouterSettings",
    "clear_config",
    "get_config",
    "load_ingress_document",
]
