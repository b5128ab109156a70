from __future__ import annotations
from bnanalysis.config import AnalysisConfig
from bnanalysis.metrics.base import AnalyzedNetwork, failed
from bnanalysis.model import MetricResult
from bnanalysis.validation import safe_nanmean

def metric_number_of_nodes(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    if item.network is None:
        return failed("n_nodes", item)
    return MetricResult(name="n_nodes", value=float(len(item.network)))

def metric_number_of_rules(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    return MetricResult(name="n_rules", value=float(sum(1 for r in item.spec.rules if r.strip())))

def metric_number_of_default_nodes(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    """Nodes without a rule, which hold their value."""
    if item.network is None:
        return failed("n_default_nodes", item)
    return MetricResult(name="n_default_nodes", value=float(len(item.network.default_nodes)))

def metric_mean_in_degree(item: AnalyzedNetwork, cfg: AnalysisConfig) -> MetricResult:
    net = item.network
    if net is None:
        return failed("mean_in_degree", item)
    degrees = [len(net.regulators(n.index)) for n in net.nodes if n.index not in net.default_nodes]
    return MetricResult(name="mean_in_degree", value=safe_nanmean(degrees), meta={"n_nodes_used": len(degrees)})
