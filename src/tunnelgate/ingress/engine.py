"""Tunnelgate Ingress Rule Matching Engine.

Matches incoming requests against a compiled RoutingTable. Rules are
evaluated in the order they were declared and the first matching rule wins,
so earlier rules take priority over the catch-all.

Example:
    table = parse_ingress(document)
    rule = table.match("api.example.com", "/users")
    if rule is not None:
        forward(rule.service)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from tunnelgate.ingress.rules import IngressRule


def split_request_url(url: str) -> tuple[str, str]:
    """Split a request URL into the host and path used for matching.

    Userinfo and port are dropped from the host. Case is preserved, since
    hostname patterns are compared exactly as received.

    Args:
        url: Full request URL, e.g. "https://www.example.com:8443/index.html".

    Returns:
        Tuple of (host, path).

    Examples:
        >>> split_request_url("https://www.example.com:8443/static/index.html")
        ('www.example.com', '/static/index.html')
    """
    parts = urlsplit(url)
    netloc = parts.netloc.rpartition("@")[2]
    if netloc.startswith("["):
        host = netloc[1:].partition("]")[0]
    else:
        host = netloc.partition(":")[0]
    return host, parts.path


@dataclass(frozen=True)
class RoutingTable:
    """Ordered, validated set of ingress rules.

    Built by parse_ingress() and never mutated afterwards, so any number of
    threads can match against it without locking. Reconfiguration builds a
    new table instead of editing this one.
    """

    rules: tuple[IngressRule, ...] = ()

    def match_index(self, host: str, path: str) -> int | None:
        """Find the 0-based index of the first rule matching a request."""
        for i, rule in enumerate(self.rules):
            if rule.matches(host, path):
                return i
        return None

    def match(self, host: str, path: str) -> IngressRule | None:
        """Find the first rule matching a request.

        Args:
            host: Request hostname, without port.
            path: Request URL path.

        Returns:
            The matching rule, or None if no rule matches.
        """
        i = self.match_index(host, path)
        return None if i is None else self.rules[i]

    def match_url(self, url: str) -> IngressRule | None:
        """Find the first rule matching a full request URL."""
        return self.match(*split_request_url(url))

    def to_dict(self) -> dict[str, Any]:
        """Export the table as a dictionary."""
        return {"ingress": [rule.to_dict() for rule in self.rules]}

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[IngressRule]:
        return iter(self.rules)
