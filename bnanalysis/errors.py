from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

class RuleError(ValueError):
    """Base class for rule failures that make a network impossible to analyse."""

    def __init__(self, message: str, rule_text: str):
        super().__init__(message)
        self.rule_text = rule_text

class ParseError(RuleError):
    """Malformed rule syntax."""

    def __init__(self, reason: str, rule_text: str):
        super().__init__(f"{reason} in rule: {rule_text!r}", rule_text)
        self.reason = reason

class UnknownReferenceError(RuleError):
    """Rule mentions a node id that was never declared."""

    def __init__(self, node_id: str, rule_text: str):
        super().__init__(f"unknown node {node_id!r} in rule: {rule_text!r}", rule_text)
        self.node_id = node_id

class WarningKind(Enum):
    TRUNCATION = "truncation"
    SIZE = "size"
    STEP_CAP = "step_cap"
    BASIN_DENOMINATOR = "basin_denominator"
    CANCELLED = "cancelled"
    NO_NODES = "no_nodes"

@dataclass(frozen=True)
class AnalysisWarning:
    """Non-fatal caveat attached to an analysis result."""
    kind: WarningKind
    message: str

    def __str__(self) -> str:
        return self.message
