import json

import pandas as pd

import bnanalysis.analysis
from run_analysis import main

def test_main_writes_outputs(tmp_path):
    rules = tmp_path / "toy.txt"
    rules.write_text("A = A\nB = A AND !C\nC = B OR A\n")
    summary = tmp_path / "summary.csv"
    code = main([str(rules), "--summary", str(summary),
                 "--json-dir", str(tmp_path / "json"), "--csv-dir", str(tmp_path / "csv")])
    assert code == 0
    df = pd.read_csv(summary)
    assert df.loc[0, "n_attractors"] == 2
    data = json.loads((tmp_path / "json" / "toy.json").read_text())
    assert len(data["attractors"]) == 2
    assert (tmp_path / "csv" / "toy_attractors.csv").exists()

def test_summary_reuses_the_analysis(tmp_path, monkeypatch):
    calls = []
    detect = bnanalysis.analysis.detect_attractors

    def counting_detect(*args, **kwargs):
        calls.append(1)
        return detect(*args, **kwargs)

    monkeypatch.setattr(bnanalysis.analysis, "detect_attractors", counting_detect)
    for name in ("a", "b"):
        (tmp_path / f"{name}.txt").write_text("A = !A\nB = A\n")
    code = main([str(tmp_path / "a.txt"), str(tmp_path / "b.txt"),
                 "--summary", str(tmp_path / "s.csv"), "--json-dir", str(tmp_path / "json")])
    assert code == 0
    assert len(calls) == 2

def test_input_nodes_in_a_rule_file(tmp_path):
    rules = tmp_path / "inputs.txt"
    rules.write_text("B = A\nC = B AND A\n")
    assert main([str(rules), "--json-dir", str(tmp_path)]) == 0
    data = json.loads((tmp_path / "inputs.json").read_text())
    assert data["nodeOrder"] == ["B", "C", "A"]

def test_main_reports_failure(tmp_path):
    rules = tmp_path / "bad.txt"
    rules.write_text("A = B AND\n")
    assert main([str(rules)]) == 1
