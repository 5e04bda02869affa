"""Ingress configuration errors.

Every error aborts compilation of the whole document. ``ParseError`` means the
document is not well-formed YAML; every ``ValidationError`` subclass names one
broken rule-language invariant so callers can tell them apart.
"""

from __future__ import annotations


class IngressError(ValueError):
    """Base class for ingress configuration errors.

    Attributes:
        rule_index: 1-based position of the offending rule, or None when the
            error concerns the document as a whole.
    """

    def __init__(self, message: str, rule_index: int | None = None) -> None:
        super().__init__(message)
        self.rule_index = rule_index


class ParseError(IngressError):
    """The document could not be decoded."""


class ValidationError(IngressError):
    """The document decoded but breaks a rule-language invariant."""


class NoRulesError(ValidationError):
    def __init__(self) -> None:
        super().__init__("No ingress rules were specified in the config file")


class InvalidServiceError(ValidationError):
    """Service is not an absolute URL with a scheme and a valid host."""


class InvalidPathError(ValidationError):
    """Path is not a valid regular expression."""


class CatchAllNotLastError(ValidationError):
    def __init__(self, rule_index: int, hostname: str) -> None:
        super().__init__(
            f"Rule #{rule_index} is matching the hostname '{hostname}', but this "
            "will match every hostname, meaning the rules which follow it will "
            "never be triggered",
            rule_index=rule_index,
        )


class LastRuleNotCatchAllError(ValidationError):
    def __init__(self, rule_index: int) -> None:
        super().__init__(
            f"Rule #{rule_index} is the last rule, so it must match all hostnames "
            "(its hostname must be missing or \"*\")",
            rule_index=rule_index,
        )


class CatchAllPathError(ValidationError):
    def __init__(self, rule_index: int) -> None:
        super().__init__(
            f"Rule #{rule_index} is the catch-all rule, so it must match all "
            "URLs and cannot have a path filter",
            rule_index=rule_index,
        )
