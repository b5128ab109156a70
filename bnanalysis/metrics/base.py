from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional

from bnanalysis.analysis import Outcome
from bnanalysis.config import AnalysisConfig
from bnanalysis.model import AnalysisResult, MetricResult, NetworkSpec
from bnanalysis.network import BooleanNetwork

@dataclass(frozen=True)
class AnalyzedNetwork:
    """A network together with its compiled form (None if it failed to parse) and outcome."""
    spec: NetworkSpec
    network: Optional[BooleanNetwork]
    outcome: Outcome

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self.outcome if self.outcome.ok else None

MetricFn = Callable[[AnalyzedNetwork, AnalysisConfig], MetricResult]

@dataclass(frozen=True)
class MetricSpec:
    name: str
    fn: MetricFn

def failed(name: str, item: AnalyzedNetwork) -> MetricResult:
    return MetricResult(name=name, value=float("nan"), meta={"error": item.outcome.message})
