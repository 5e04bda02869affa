"""Tunnelgate Ingress Configuration.

Compiles the ``ingress`` section of a YAML configuration document into a
validated RoutingTable.

Example YAML configuration:
    ingress:
      - hostname: api.example.com
        service: http://localhost:8000
      - hostname: "*.example.com"
        path: /static/.*\\.html
        service: http://localhost:8001
      - service: http://localhost:8080

Rules are evaluated in document order. The last rule must be the catch-all
(no hostname, or "*") and no other rule may be one.
"""

from __future__ import annotations

import re
from typing import Any

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field

from tunnelgate.ingress.engine import RoutingTable
from tunnelgate.ingress.errors import (
    CatchAllNotLastError,
    CatchAllPathError,
    InvalidPathError,
    InvalidServiceError,
    LastRuleNotCatchAllError,
    NoRulesError,
    ParseError,
    ValidationError,
)
from tunnelgate.ingress.rules import IngressRule, ServiceURL


class UnvalidatedIngressRule(BaseModel):
    """A rule as written in the config file, before its fields are compiled."""

    model_config = ConfigDict(extra="ignore")

    hostname: str | None = None
    path: str | None = None
    service: str


class IngressDocument(BaseModel):
    """The parts of a configuration document the router reads.

    Other top-level keys belong to other parts of the agent and are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    ingress: list[UnvalidatedIngressRule] | None = Field(default=None)


def decode_document(document: bytes | str) -> dict[str, Any]:
    """Decode a YAML document into a generic mapping.

    Args:
        document: Raw document bytes or text.

    Returns:
        The decoded mapping; an empty document decodes to {}.

    Raises:
        ParseError: If the document is not valid YAML.
        ValidationError: If the document is not a mapping.
    """
    try:
        data = yaml.safe_load(document)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML in ingress config: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(
            f"Config document must be a mapping, not {type(data).__name__}"
        )
    return data


def compile_rule(raw: UnvalidatedIngressRule, rule_index: int) -> IngressRule:
    """Compile one rule's service URL and path regex.

    Args:
        raw: The rule as read from the document.
        rule_index: 1-based position of the rule, used in error messages.

    Raises:
        InvalidServiceError: If the service URL is invalid.
        InvalidPathError: If the path is not a valid regex.
    """
    try:
        service = ServiceURL.parse(raw.service)
    except ValueError as e:
        raise InvalidServiceError(
            f"Rule #{rule_index} has an invalid service: {e}", rule_index=rule_index
        ) from e

    path = None
    if raw.path:
        try:
            path = re.compile(raw.path)
        except re.error as e:
            raise InvalidPathError(
                f"Rule #{rule_index} has an invalid path regex '{raw.path}': {e}",
                rule_index=rule_index,
            ) from e

    return IngressRule(hostname=raw.hostname or "", service=service, path=path)


def validate_rules(rules: list[IngressRule]) -> None:
    """Check the table-level catch-all invariants.

    Stops at the first violation.

    Raises:
        CatchAllNotLastError: If a rule before the last matches every host.
        LastRuleNotCatchAllError: If the last rule doesn't match every host.
        CatchAllPathError: If the catch-all rule has a path filter.
    """
    last = len(rules)
    for rule_index, rule in enumerate(rules, start=1):
        if rule_index < last:
            if rule.is_catch_all:
                raise CatchAllNotLastError(rule_index, rule.hostname)
            continue
        if not rule.is_catch_all:
            raise LastRuleNotCatchAllError(rule_index)
        if rule.path is not None:
            raise CatchAllPathError(rule_index)


def parse_ingress(document: bytes | str) -> RoutingTable:
    """Compile a configuration document into a RoutingTable.

    Either the whole document compiles or an error is raised; no partial
    table is ever returned.

    Args:
        document: Raw YAML bytes or text.

    Returns:
        The compiled, immutable RoutingTable.

    Raises:
        ParseError: If the document is not valid YAML.
        ValidationError: If the document breaks any ingress invariant.
    """
    data = decode_document(document)

    try:
        parsed = IngressDocument.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid ingress config: {e}") from e

    if not parsed.ingress:
        raise NoRulesError()

    rules = [
        compile_rule(raw, rule_index)
        for rule_index, raw in enumerate(parsed.ingress, start=1)
    ]
    validate_rules(rules)
    return RoutingTable(rules=tuple(rules))
