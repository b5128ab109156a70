from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from bnanalysis.errors import AnalysisWarning, RuleError, WarningKind

@dataclass(frozen=True)
class Node:
    id: str
    label: str
    index: int

@dataclass(frozen=True)
class NetworkSpec:
    """Uncompiled network as supplied by a caller or read from a rule file."""
    name: str
    rules: Tuple[str, ...]
    nodes: Optional[Tuple[Dict[str, str], ...]] = None  # {id, label}; None derives nodes from rule targets

@dataclass(frozen=True)
class StateSnapshot:
    state: int
    binary: str                 # big-endian: node N-1 leftmost
    values: Dict[str, int]      # node id (and differing label) -> 0/1

class AttractorType(Enum):
    FIXED_POINT = "fixed-point"
    LIMIT_CYCLE = "limit-cycle"

@dataclass(frozen=True)
class Attractor:
    id: int
    type: AttractorType
    period: int
    states: Tuple[int, ...]     # cycle order, starting at the entry state
    basin_size: int
    basin_share: float
    snapshots: Tuple[StateSnapshot, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "period": self.period,
            "states": [{"state": s.state, "binary": s.binary, "values": dict(s.values)} for s in self.snapshots],
            "basinSize": self.basin_size,
            "basinShare": self.basin_share,
        }

@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of a completed (possibly capped) attractor analysis."""
    node_order: Tuple[str, ...]
    node_labels: Dict[str, str]
    attractors: Tuple[Attractor, ...]
    explored_state_count: int
    classified_state_count: int
    total_state_space: int
    truncated: bool
    unresolved_state_count: int
    basin_denominator: int
    cancelled: bool = False
    warnings: Tuple[AnalysisWarning, ...] = ()

    ok = True

    @property
    def warning_messages(self) -> List[str]:
        return [w.message for w in self.warnings]

    def has_warning(self, kind: WarningKind) -> bool:
        return any(w.kind is kind for w in self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready payload keyed the way the presentation layer reads it."""
        return {
            "nodeOrder": list(self.node_order),
            "nodeLabels": dict(self.node_labels),
            "attractors": [a.to_dict() for a in self.attractors],
            "exploredStateCount": self.explored_state_count,
            "classifiedStateCount": self.classified_state_count,
            "totalStateSpace": self.total_state_space,
            "truncated": self.truncated,
            "unresolvedStates": self.unresolved_state_count,
            "basinDenominator": self.basin_denominator,
            "cancelled": self.cancelled,
            "warnings": self.warning_messages,
        }

    def attractor_table(self) -> pd.DataFrame:
        """One row per attractor, states rendered as binary strings."""
        rows = []
        for a in self.attractors:
            rows.append({
                "id": a.id,
                "type": a.type.value,
                "period": a.period,
                "basin_size": a.basin_size,
                "basin_share": a.basin_share,
                "states": " -> ".join(s.binary for s in a.snapshots),
            })
        return pd.DataFrame(rows, columns=["id", "type", "period", "basin_size", "basin_share", "states"])

@dataclass(frozen=True)
class AnalysisFailure:
    """The network could not be analysed; no partial result exists."""
    error: RuleError

    ok = False

    @property
    def message(self) -> str:
        return str(self.error)

@dataclass(frozen=True)
class MetricResult:
    """Standard output of any summary metric."""
    name: str
    value: float
    meta: Optional[Dict[str, Any]] = field(default=None)
