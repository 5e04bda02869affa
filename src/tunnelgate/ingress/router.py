"""Active routing state shared by request handlers.

IngressRouter holds the RoutingTable currently in effect. Handlers read it
concurrently while a reload swaps in a freshly compiled table. A table is
published by a single reference assignment, so readers see either the old
table or the new one in full.
"""

from __future__ import annotations

import threading

import structlog

from tunnelgate.ingress.config import parse_ingress
from tunnelgate.ingress.engine import RoutingTable, split_request_url
from tunnelgate.ingress.errors import IngressError
from tunnelgate.ingress.rules import IngressRule, ServiceURL

logger = structlog.get_logger()


class IngressRouter:
    """Holds the active RoutingTable and swaps it atomically on reload."""

    def __init__(self, table: RoutingTable | None = None) -> None:
        self._table = table
        self._reload_lock = threading.Lock()

    @property
    def table(self) -> RoutingTable | None:
        """The table currently in effect, or None before the first load."""
        return self._table

    def reload(self, document: bytes | str) -> RoutingTable:
        """Compile a document and make it the active table.

        If compilation fails the error propagates and the previous table
        stays active.

        Args:
            document: Raw YAML configuration.

        Returns:
            The newly published table.

        Raises:
            IngressError: If the document doesn't compile.
        """
        with self._reload_lock:
            try:
                table = parse_ingress(document)
            except IngressError as e:
                logger.warning(
                    "Ingress reload rejected, keeping previous rules",
                    error=str(e),
                    rule_index=e.rule_index,
                    active_rules=len(self._table) if self._table else 0,
                )
                raise
            self._table = table

        logger.info("Ingress rules loaded", rules=len(table))
        return table

    def match(self, host: str, path: str) -> IngressRule | None:
        """Match a request against the active table."""
        table = self._table
        if table is None:
            logger.debug("No ingress rules loaded", host=host, path=path)
            return None
        rule = table.match(host, path)
        if rule is None:
            logger.debug("No ingress rule matched", host=host, path=path)
        return rule

    def match_url(self, url: str) -> IngressRule | None:
        """Match a full request URL against the active table."""
        return self.match(*split_request_url(url))

    def service_for(self, host: str, path: str) -> ServiceURL | None:
        """Return the service a request should be forwarded to."""
        rule = self.match(host, path)
        return rule.service if rule is not None else None
