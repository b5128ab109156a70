from __future__ import annotations
import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from bnanalysis.model import AnalysisFailure, AnalysisResult, NetworkSpec
from bnanalysis.parser import RESERVED_WORDS

PathLike = Union[str, Path]

# longest symbols first so "&&" is not read as two "&"
_C_STYLE = [
    (re.compile(r"&&|&|∧"), " AND "),
    (re.compile(r"\|\||\||∨"), " OR "),
    (re.compile(r"~|¬"), "!"),
]

# right-hand sides marking a node as an input with no rule of its own
_INPUT_MARKERS = ("UNDEFINED", "NULL")
_IDENT = re.compile(r"[A-Za-z0-9_]+")

def normalize_c_style(rule: str) -> str:
    """Rewrite C-style operators (&&, ||, ~ and friends) into the word grammar."""
    for pattern, word in _C_STYLE:
        rule = pattern.sub(word, rule)
    return re.sub(r"[ \t]+", " ", rule).strip()

def _split_rule(rule: str) -> Optional[Tuple[str, str]]:
    if rule.count("=") != 1:
        return None
    lhs, rhs = (part.strip() for part in rule.split("="))
    if not _IDENT.fullmatch(lhs) or lhs.upper() in RESERVED_WORDS:
        return None
    return lhs, rhs

def collect_nodes(rules: Sequence[str], labels: Optional[Mapping[str, str]] = None
                  ) -> Tuple[List[str], Optional[Tuple[Dict[str, str], ...]]]:
    """Node list for a rule file: targets first, then input nodes, each in first-seen order.

    Input nodes are identifiers referenced on a right-hand side without a rule
    of their own, plus targets whose rule is ``undefined``/``null``; those
    rules are dropped so the node keeps its value. Malformed rules are kept
    as they are for the parser to report.
    """
    kept: List[str] = []
    order: Dict[str, None] = {}
    referenced: List[str] = []
    for rule in rules:
        parts = _split_rule(rule)
        if parts is None:
            kept.append(rule)
            continue
        target, rhs = parts
        order.setdefault(target, None)
        if rhs.upper() in _INPUT_MARKERS:
            continue
        kept.append(rule)
        referenced.extend(name for name in _IDENT.findall(rhs) if name.upper() not in RESERVED_WORDS)

    for name in referenced:
        # 1 and 0 stay literals unless some rule targets them
        if name in ("0", "1") and name not in order:
            continue
        order.setdefault(name, None)

    if not order:
        return kept, None
    labels = labels or {}
    return kept, tuple({"id": n, "label": labels.get(n) or n} for n in order)

def parse_rules_text(text: str, name: str = "network", c_style: bool = False) -> NetworkSpec:
    """One rule per line; blank lines and lines starting with '#' are skipped."""
    rules = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        rules.append(normalize_c_style(line) if c_style else line)
    rules, nodes = collect_nodes(rules)
    return NetworkSpec(name=name, rules=tuple(rules), nodes=nodes)

def load_rules_txt(path: PathLike, c_style: bool = False) -> NetworkSpec:
    path = Path(path)
    return parse_rules_text(path.read_text(encoding="utf-8"), name=path.stem, c_style=c_style)

def load_rules_csv(path: PathLike, c_style: bool = False) -> NetworkSpec:
    """Rules from a CSV with a ``rule`` column, or ``target``/``expression`` columns.

    An optional ``label`` column next to ``target`` supplies node labels.
    """
    path = Path(path)
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [str(c).strip().lower() for c in df.columns]

    labels = {}
    if "rule" in df.columns:
        rules = [r.strip() for r in df["rule"] if r.strip()]
    elif {"target", "expression"} <= set(df.columns):
        df = df[df["target"].str.strip() != ""]
        rules = [f"{t.strip()} = {e.strip()}" for t, e in zip(df["target"], df["expression"])]
        if "label" in df.columns:
            labels = {t.strip(): l.strip() for t, l in zip(df["target"], df["label"]) if l.strip()}
    else:
        raise ValueError(f"{path}: expected a 'rule' column or 'target' and 'expression' columns, "
                         f"got {list(df.columns)}")

    if c_style:
        rules = [normalize_c_style(r) for r in rules]
    rules, nodes = collect_nodes(rules, labels)
    return NetworkSpec(name=path.stem, rules=tuple(rules), nodes=nodes)

def load_networks(paths: Iterable[PathLike], c_style: bool = False) -> Tuple[List[NetworkSpec], dict]:
    """Load every rule file; CSV by suffix, anything else as plain text."""
    paths = [Path(p) for p in paths]
    specs: List[NetworkSpec] = []
    for p in paths:
        if p.suffix.lower() == ".csv":
            specs.append(load_rules_csv(p, c_style=c_style))
        else:
            specs.append(load_rules_txt(p, c_style=c_style))

    meta = {
        "paths": [str(p) for p in paths],
        "n_networks": len(specs),
        "n_rules": [len(s.rules) for s in specs],
    }
    return specs, meta

def export_rules_txt(spec: NetworkSpec) -> str:
    return "\n".join(spec.rules) + "\n"

def outcome_to_dict(outcome: Union[AnalysisResult, AnalysisFailure]) -> Dict[str, Any]:
    if isinstance(outcome, AnalysisFailure):
        err = outcome.error
        payload = {"error": type(err).__name__, "message": str(err), "ruleText": err.rule_text}
        node_id = getattr(err, "node_id", None)
        if node_id is not None:
            payload["nodeId"] = node_id
        return payload
    return outcome.to_dict()

def write_result_json(outcome: Union[AnalysisResult, AnalysisFailure], path: PathLike):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(outcome_to_dict(outcome), f, indent=2)
