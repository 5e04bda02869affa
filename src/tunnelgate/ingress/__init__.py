"""Tunnelgate Ingress Routing Module.

Compiles an ordered list of hostname/path to service rules from a YAML
configuration document and selects the service each incoming request is
forwarded to.

Features:
- Exact and wildcard (*.example.com) hostname matching
- Path matching with regular expressions
- First-match-wins evaluation in declared order
- A mandatory catch-all rule, which must come last
- Atomic replacement of the active rules on reload

Usage:
    from tunnelgate.ingress import IngressRouter

    router = IngressRouter()
    router.reload(open("config.yml", "rb").read())

    rule = router.match("api.example.com", "/users")
    if rule:
        print(f"Forward to: {rule.service}")

Configuration:
    ingress:
      - hostname: api.example.com
        service: http://localhost:8000
      - service: http://localhost:8080
"""

from tunnelgate.ingress.config import (
    IngressDocument,
    UnvalidatedIngressRule,
    parse_ingress,
)
from tunnelgate.ingress.engine import RoutingTable, split_request_url
from tunnelgate.ingress.errors import (
    CatchAllNotLastError,
    CatchAllPathError,
    IngressError,
    InvalidPathError,
    InvalidServiceError,
    LastRuleNotCatchAllError,
    NoRulesError,
    ParseError,
    ValidationError,
)
from tunnelgate.ingress.router import IngressRouter
from tunnelgate.ingress.rules import (
    IngressRule,
    ServiceURL,
    is_catch_all_hostname,
    match_hostname,
)

__all__ = [
    # Engine
    "IngressRouter",
    "RoutingTable",
    "split_request_url",
    # Rules
    "IngressRule",
    "ServiceURL",
    "is_catch_all_hostname",
    "match_hostname",
    # Configuration
    "IngressDocument",
    "UnvalidatedIngressRule",
    "parse_ingress",
    # Errors
    "IngressError",
    "ParseError",
    "ValidationError",
    "NoRulesError",
    "InvalidServiceError",
    "InvalidPathError",
    "CatchAllNotLastError",
    "LastRuleNotCatchAllError",
    "CatchAllPathError",
]
