from __future__ import annotations
from typing import List, Optional, Sequence

import pandas as pd
from tqdm import tqdm

from bnanalysis.analysis import analyze_compiled
from bnanalysis.config import AnalysisConfig
from bnanalysis.errors import RuleError
from bnanalysis.metrics.base import AnalyzedNetwork, MetricSpec
from bnanalysis.model import AnalysisFailure, NetworkSpec
from bnanalysis.network import compile_network

from bnanalysis.metrics.structure import (
    metric_number_of_nodes, metric_number_of_rules, metric_number_of_default_nodes, metric_mean_in_degree
)
from bnanalysis.metrics.dynamics import (
    metric_number_of_attractors, metric_number_of_fixed_points, metric_number_of_limit_cycles,
    metric_mean_period, metric_max_period, metric_largest_basin_share, metric_basin_entropy,
    metric_explored_fraction
)

def build_metric_registry() -> List[MetricSpec]:
    """Central list of per-network summary metrics used to build the summary table."""
    return [
        # structural
        MetricSpec("n_nodes", metric_number_of_nodes),
        MetricSpec("n_rules", metric_number_of_rules),
        MetricSpec("n_default_nodes", metric_number_of_default_nodes),
        MetricSpec("mean_in_degree", metric_mean_in_degree),

        # attractor landscape
        MetricSpec("n_attractors", metric_number_of_attractors),
        MetricSpec("n_fixed_points", metric_number_of_fixed_points),
        MetricSpec("n_limit_cycles", metric_number_of_limit_cycles),
        MetricSpec("mean_period", metric_mean_period),
        MetricSpec("max_period", metric_max_period),
        MetricSpec("largest_basin_share", metric_largest_basin_share),
        MetricSpec("basin_entropy", metric_basin_entropy),
        MetricSpec("explored_fraction", metric_explored_fraction),
    ]

def analyze_specs(specs: Sequence[NetworkSpec], cfg: AnalysisConfig, progress: bool = False) -> List[AnalyzedNetwork]:
    out = []
    for spec in tqdm(specs, desc="Analysing networks", unit="network", disable=not progress):
        try:
            network = compile_network(spec.nodes, spec.rules)
        except RuleError as e:
            out.append(AnalyzedNetwork(spec=spec, network=None, outcome=AnalysisFailure(error=e)))
            continue
        out.append(AnalyzedNetwork(spec=spec, network=network, outcome=analyze_compiled(network, cfg)))
    return out

def summarize(items: Sequence[AnalyzedNetwork], cfg: AnalysisConfig,
              registry: Optional[List[MetricSpec]] = None) -> pd.DataFrame:
    """Summary table for networks that were already analysed."""
    registry = registry if registry is not None else build_metric_registry()
    rows = []
    for item in items:
        row = {"network_name": item.spec.name, "ok": bool(item.outcome.ok)}
        for spec in registry:
            res = spec.fn(item, cfg)
            row[spec.name] = res.value
        rows.append(row)
    return pd.DataFrame(rows, columns=["network_name", "ok"] + [s.name for s in registry])

def compute_summaries(specs: Sequence[NetworkSpec], cfg: AnalysisConfig,
                      registry: Optional[List[MetricSpec]] = None, progress: bool = False) -> pd.DataFrame:
    return summarize(analyze_specs(specs, cfg, progress=progress), cfg, registry)
