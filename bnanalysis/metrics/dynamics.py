from __future__ import annotations
import numpy as np

from bnanalysis.config import AnalysisConfig
from bnanalysis.metrics.base import AnalyzedNetwork, failed
from bnanalysis.model import AttractorType, MetricResult
from bnanalysis.validation import safe_div, safe_nanmean, shannon_entropy

def metric_number_of_attractors(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    res = item.result
    if res is None:
        return failed("n_attractors", item)
    return MetricResult(name="n_attractors", value=float(len(res.attractors)), meta={"truncated": res.truncated})

def metric_number_of_fixed_points(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    res = item.result
    if res is None:
        return failed("n_fixed_points", item)
    n = sum(1 for a in res.attractors if a.type is AttractorType.FIXED_POINT)
    return MetricResult(name="n_fixed_points", value=float(n))

def metric_number_of_limit_cycles(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    res = item.result
    if res is None:
        return failed("n_limit_cycles", item)
    n = sum(1 for a in res.attractors if a.type is AttractorType.LIMIT_CYCLE)
    return MetricResult(name="n_limit_cycles", value=float(n))

def metric_mean_period(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    res = item.result
    if res is None:
        return failed("mean_period", item)
    return MetricResult(name="mean_period", value=safe_nanmean(a.period for a in res.attractors))

def metric_max_period(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    res = item.result
    if res is None or not res.attractors:
        return MetricResult(name="max_period", value=float("nan"),
                            meta={"error": item.outcome.message} if res is None else None)
    return MetricResult(name="max_period", value=float(max(a.period for a in res.attractors)))

def metric_largest_basin_share(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    res = item.result
    if res is None or not res.attractors:
        return MetricResult(name="largest_basin_share", value=float("nan"),
                            meta={"error": item.outcome.message} if res is None else None)
    return MetricResult(name="largest_basin_share", value=float(max(a.basin_share for a in res.attractors)))

def metric_basin_entropy(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    """Shannon entropy of the basin size distribution; 0 for a single attractor."""
    res = item.result
    if res is None:
        return failed("basin_entropy", item)
    sizes = np.array([a.basin_size for a in res.attractors], dtype=float)
    return MetricResult(name="basin_entropy", value=shannon_entropy(sizes), meta={"n_attractors": int(sizes.size)})

def metric_explored_fraction(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    res = item.result
    if res is None:
        return failed("explored_fraction", item)
    frac = safe_div([res.explored_state_count], [res.total_state_space])[0]
    return MetricResult(name="explored_fraction", value=float(frac))
