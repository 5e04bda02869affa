"""Tunnelgate - ingress routing for tunnel agents."""

__version__ = "0.1.0"
