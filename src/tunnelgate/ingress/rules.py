"""Tunnelgate Ingress Rules.

An ingress rule maps a hostname pattern and an optional path regex to the
origin service that matching requests are forwarded to.

Hostname patterns:
- "" or "*": matches every hostname (the catch-all rule)
- "*.example.com": matches any hostname ending in ".example.com"
- anything else: exact, case-sensitive match

Example:
    rule = IngressRule(
        hostname="*.example.com",
        service=ServiceURL.parse("http://localhost:8000"),
        path=re.compile(r"/static/.*\\.html"),
    )
    rule.matches("www.example.com", "/static/index.html")  # True
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

# RFC 3986 reg-name: unreserved / pct-encoded / sub-delims
_REG_NAME_RE = re.compile(r"^[A-Za-z0-9\-._~!$&'()*+,;=%]+$")


def is_catch_all_hostname(hostname: str) -> bool:
    """Check if a hostname pattern matches every host."""
    return hostname in ("", "*")


def match_hostname(pattern: str, host: str) -> bool:
    """Check if a request host satisfies a rule's hostname pattern.

    Only a leading "*." is a wildcard. The remainder, dot included, must end
    the host, so "*.example.com" matches "a.example.com" and
    "a.b.example.com" but neither "example.com" nor "xexample.com". A "*"
    anywhere else is literal.

    Examples:
        >>> match_hostname("*.example.com", "api.example.com")
        True
        >>> match_hostname("*example.com", "www.example.com")
        False
    """
    if is_catch_all_hostname(pattern):
        return True
    if pattern.startswith("*."):
        return host.endswith(pattern[1:])
    return host == pattern


@dataclass(frozen=True)
class ServiceURL:
    """Absolute URL of the origin service a rule forwards to."""

    scheme: str
    host: str
    port: int | None = None
    path: str = ""
    url: str = ""

    @classmethod
    def parse(cls, raw: str) -> ServiceURL:
        """Parse and validate a service URL.

        Args:
            raw: URL such as "https://localhost:8000".

        Returns:
            The parsed ServiceURL.

        Raises:
            ValueError: If the URL is malformed, has no scheme, or its host is
                missing or contains illegal characters.
        """
        # urlsplit silently drops tabs and newlines and strips leading whitespace
        if any(c.isspace() or ord(c) < 0x20 or c == "\x7f" for c in raw):
            raise ValueError(f"{raw!r} contains whitespace or a control character")

        try:
            parts = urlsplit(raw)
            port = parts.port
        except ValueError as e:
            raise ValueError(f"'{raw}' is not a valid URL: {e}") from e

        if not parts.scheme:
            raise ValueError(
                f"'{raw}' doesn't have a scheme, e.g. http://localhost:8000"
            )

        host = parts.hostname
        if not host:
            raise ValueError(f"'{raw}' doesn't have a hostname")
        if not _is_valid_host(host):
            raise ValueError(f"'{raw}' has an invalid hostname '{host}'")

        return cls(
            scheme=parts.scheme,
            host=host,
            port=port,
            path=parts.path,
            url=parts.geturl(),
        )

    def __str__(self) -> str:
        return self.url


def _is_valid_host(host: str) -> bool:
    if ":" in host:
        # Only IPv6 literals may contain colons once the port is split off
        try:
            ipaddress.IPv6Address(host.split("%", 1)[0])
        except ValueError:
            return False
        return True
    return bool(_REG_NAME_RE.match(host))


@dataclass(frozen=True)
class IngressRule:
    """One hostname/path to service mapping.

    Rules are immutable once compiled. The path regex is compiled at load
    time and searched anywhere within the request path.
    """

    hostname: str
    service: ServiceURL
    path: re.Pattern[str] | None = None

    @property
    def is_catch_all(self) -> bool:
        """True if this rule matches every hostname."""
        return is_catch_all_hostname(self.hostname)

    def matches(self, host: str, path: str) -> bool:
        """Check if a request's host and path both satisfy this rule."""
        if not match_hostname(self.hostname, host):
            return False
        if self.path is None:
            return True
        return self.path.search(path) is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert rule to dictionary for display."""
        return {
            "hostname": self.hostname,
            "path": self.path.pattern if self.path is not None else None,
            "service": str(self.service),
        }
