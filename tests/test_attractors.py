import pytest

from bnanalysis.analysis import analyze_network
from bnanalysis.config import AnalysisConfig
from bnanalysis.detector import StateStatus, detect_attractors
from bnanalysis.errors import ParseError, UnknownReferenceError, WarningKind
from bnanalysis.model import AnalysisFailure, AnalysisResult, AttractorType
from bnanalysis.network import compile_network

NODES = ["A", "B", "C"]
SCENARIO_A = ["A = A", "B = A AND !C", "C = B OR A"]
# three-bit binary counter: one limit cycle through all 8 states
COUNTER = ["A = !A", "B = B XOR A", "C = C XOR (A AND B)"]

def test_scenario_a_exhaustive():
    res = analyze_network(NODES, SCENARIO_A, AnalysisConfig(state_cap=8, step_cap=8))
    assert isinstance(res, AnalysisResult)
    assert res.explored_state_count == 8
    assert res.total_state_space == 8
    assert not res.truncated
    assert res.warnings == ()

    assert [a.id for a in res.attractors] == [0, 1]
    first, second = res.attractors
    assert first.type is AttractorType.FIXED_POINT and first.states == (0,)
    assert second.type is AttractorType.FIXED_POINT and second.states == (5,)
    assert first.basin_size == 4 and second.basin_size == 4
    assert sum(a.basin_share for a in res.attractors) == pytest.approx(1.0)
    assert second.snapshots[0].binary == "101"
    assert second.snapshots[0].values == {"A": 1, "B": 0, "C": 1}

def test_scenario_a_state_classes():
    det = detect_attractors(compile_network(NODES, SCENARIO_A), AnalysisConfig(state_cap=8, step_cap=8))
    assert det.status_of(0) == (StateStatus.MEMBER, 0)
    assert det.status_of(5) == (StateStatus.MEMBER, 1)
    for s in (2, 4, 6):
        assert det.status_of(s) == (StateStatus.TRANSIENT, 0)
    for s in (1, 3, 7):
        assert det.status_of(s) == (StateStatus.TRANSIENT, 1)

def test_scenario_b_single_oscillator():
    res = analyze_network(["A"], ["A = !A"])
    assert len(res.attractors) == 1
    att = res.attractors[0]
    assert att.type is AttractorType.LIMIT_CYCLE
    assert att.period == 2
    assert att.states == (0, 1)
    assert att.basin_share == 1.0

def test_scenario_c_truncated_state_space():
    res = analyze_network(NODES, SCENARIO_A, AnalysisConfig(state_cap=4, step_cap=8))
    assert res.truncated
    assert res.has_warning(WarningKind.TRUNCATION)
    assert "state space truncated to 4 of 8 states" in res.warning_messages
    assert res.explored_state_count <= 4
    assert sum(a.basin_share for a in res.attractors) <= 1.0 + 1e-12

    # states reached from the first four starts are still followed
    assert res.classified_state_count == 7
    assert res.basin_denominator == 7
    assert res.has_warning(WarningKind.BASIN_DENOMINATOR)
    assert [a.basin_size for a in res.attractors] == [3, 4]

def test_scenario_d_unknown_reference_fails_whole_analysis():
    res = analyze_network(["A", "B"], ["B = A", "A = B AND Z"])
    assert isinstance(res, AnalysisFailure)
    assert not res.ok
    assert isinstance(res.error, UnknownReferenceError)
    assert res.error.node_id == "Z"
    assert res.error.rule_text == "A = B AND Z"

def test_malformed_rule_fails_whole_analysis():
    res = analyze_network(NODES, ["A = A", "B = (A AND C"])
    assert isinstance(res, AnalysisFailure)
    assert isinstance(res.error, ParseError)

def test_counter_is_one_long_cycle():
    res = analyze_network(NODES, COUNTER, AnalysisConfig(step_cap=8))
    assert len(res.attractors) == 1
    assert res.attractors[0].states == tuple(range(8))
    assert res.attractors[0].period == 8
    assert not res.has_warning(WarningKind.STEP_CAP)

def test_step_cap_leaves_trajectories_unclassified():
    res = analyze_network(NODES, COUNTER, AnalysisConfig(step_cap=3))
    assert res.has_warning(WarningKind.STEP_CAP)
    assert res.attractors == ()
    assert res.classified_state_count == 0
    assert res.explored_state_count == 0
    # every state sits on some abandoned walk
    assert res.unresolved_state_count == 8

def test_step_cap_never_hit_when_it_covers_the_state_space():
    for rules in (SCENARIO_A, COUNTER, ["A = B", "B = C", "C = !A"]):
        res = analyze_network(NODES, rules, AnalysisConfig(step_cap=8))
        assert not res.has_warning(WarningKind.STEP_CAP)
        assert res.unresolved_state_count == 0

def test_attractor_ids_follow_smallest_discovering_state():
    # fixed points 0, 2 and 3; state 1 drains into 2
    res = analyze_network(["A", "B"], ["A = A AND B", "B = A OR B"])
    assert [a.id for a in res.attractors] == [0, 1, 2]
    assert [a.states for a in res.attractors] == [(0,), (2,), (3,)]
    assert [a.basin_size for a in res.attractors] == [1, 2, 1]

def test_size_warning_is_non_fatal():
    res = analyze_network(NODES, SCENARIO_A, AnalysisConfig(size_warning_nodes=2))
    assert res.has_warning(WarningKind.SIZE)
    assert len(res.attractors) == 2

def test_empty_network_is_skipped():
    res = analyze_network([], [])
    assert res.ok
    assert res.total_state_space == 0
    assert res.has_warning(WarningKind.NO_NODES)

def test_cancellation_returns_flagged_result():
    res = analyze_network(NODES, SCENARIO_A, should_cancel=lambda: True)
    assert res.cancelled
    assert res.has_warning(WarningKind.CANCELLED)
    assert res.attractors == ()

def test_cancellation_mid_run_keeps_finished_attractors():
    calls = {"n": 0}

    def stop_after_a_few():
        calls["n"] += 1
        return calls["n"] > 4

    res = analyze_network(NODES, SCENARIO_A, should_cancel=stop_after_a_few)
    assert res.cancelled
    assert sum(a.basin_share for a in res.attractors) < 1.0
    assert res.attractors[0].states == (0,)

def test_lazy_and_tabulated_successors_agree():
    rules = ["A = B XOR C", "B = !(A NOR D)", "C = A NAND true", "D = C OR (B AND !A)"]
    table = analyze_network(None, rules)
    lazy = analyze_network(None, rules, AnalysisConfig(table_max_states=0))
    assert table == lazy

def test_truncated_runs_compute_successors_lazily(monkeypatch):
    net = compile_network(NODES, SCENARIO_A)
    monkeypatch.setattr(net, "transition_table", lambda: pytest.fail("table built for a truncated run"))
    det = detect_attractors(net, AnalysisConfig(state_cap=4, step_cap=8))
    assert det.cycles == [(0,), (5,)]

def test_invalid_caps_rejected():
    with pytest.raises(ValueError):
        AnalysisConfig(state_cap=0)
    with pytest.raises(ValueError):
        AnalysisConfig(step_cap=0)

def test_result_exports():
    res = analyze_network(NODES, SCENARIO_A)
    payload = res.to_dict()
    assert payload["nodeOrder"] == NODES
    assert payload["attractors"][1]["type"] == "fixed-point"
    assert payload["attractors"][1]["states"][0]["binary"] == "101"
    df = res.attractor_table()
    assert list(df["id"]) == [0, 1]
    assert list(df["states"]) == ["000", "101"]
