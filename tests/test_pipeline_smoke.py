import math

from bnanalysis.config import AnalysisConfig
from bnanalysis.model import NetworkSpec
from bnanalysis.pipeline import analyze_specs, build_metric_registry, compute_summaries

SPECS = [
    NetworkSpec(name="scenario_a", rules=("A = A", "B = A AND !C", "C = B OR A")),
    NetworkSpec(name="oscillator", rules=("A = !A",)),
    NetworkSpec(name="broken", rules=("A = B",), nodes=({"id": "A", "label": "A"},)),
]

def test_pipeline_smoke():
    cfg = AnalysisConfig()
    df = compute_summaries(SPECS, cfg, build_metric_registry())
    assert df.shape[0] == len(SPECS)
    assert "n_attractors" in df.columns
    assert "basin_entropy" in df.columns
    assert list(df["ok"]) == [True, True, False]

def test_summary_values():
    df = compute_summaries(SPECS, AnalysisConfig()).set_index("network_name")
    a = df.loc["scenario_a"]
    assert a["n_nodes"] == 3
    assert a["n_attractors"] == 2
    assert a["n_fixed_points"] == 2
    assert a["n_limit_cycles"] == 0
    assert abs(a["mean_in_degree"] - 5 / 3) < 1e-9
    assert abs(a["basin_entropy"] - math.log(2)) < 1e-9
    assert a["largest_basin_share"] == 0.5
    assert a["explored_fraction"] == 1.0

    osc = df.loc["oscillator"]
    assert osc["max_period"] == 2
    assert osc["basin_entropy"] == 0.0

    broken = df.loc["broken"]
    assert broken["n_rules"] == 1
    assert math.isnan(broken["n_attractors"])

def test_failed_network_keeps_error_in_meta():
    item = analyze_specs(SPECS[2:], AnalysisConfig())[0]
    assert item.network is None
    res = build_metric_registry()[4].fn(item, AnalysisConfig())
    assert res.name == "n_attractors"
    assert "unknown node 'B'" in res.meta["error"]
