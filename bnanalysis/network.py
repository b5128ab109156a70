from __future__ import annotations
import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from bnanalysis.codec import StateCodec
from bnanalysis.errors import ParseError
from bnanalysis.expression import Expression, Variable
from bnanalysis.model import Node
from bnanalysis.parser import parse_rule

logger = logging.getLogger(__name__)

NodeLike = Union[Node, Mapping[str, str], str]

class BooleanNetwork:
    """A compiled Boolean network with a synchronous update.

    ``expressions[i]`` is the update rule of node ``i``. Nodes that were given
    no rule get the identity ``Variable(i)`` and keep their value every step;
    their indices are listed in ``default_nodes``.
    """

    def __init__(self, nodes: Sequence[Node], expressions: Sequence[Expression],
                 default_nodes: Iterable[int] = ()):
        if len(nodes) != len(expressions):
            raise ValueError("one expression per node required")
        self.nodes: Tuple[Node, ...] = tuple(nodes)
        self.expressions: Tuple[Expression, ...] = tuple(expressions)
        self.default_nodes: Tuple[int, ...] = tuple(sorted(default_nodes))
        self.codec = StateCodec(len(self.nodes))

    def __len__(self):
        return len(self.nodes)

    @property
    def node_order(self) -> Tuple[str, ...]:
        return tuple(n.id for n in self.nodes)

    @property
    def node_labels(self) -> Dict[str, str]:
        return {n.id: n.label for n in self.nodes}

    @property
    def total_states(self) -> int:
        return self.codec.total_states

    def transition(self, state: int) -> int:
        """Synchronous successor of ``state``."""
        nxt = 0
        for i, expr in enumerate(self.expressions):
            if expr.evaluate(state):
                nxt |= 1 << i
        return nxt

    def transition_table(self) -> np.ndarray:
        """Successor of every state at once, indexed by state."""
        bits = self.codec.bit_matrix()
        table = np.zeros(self.total_states, dtype=np.int64)
        for i, expr in enumerate(self.expressions):
            table |= expr.evaluate_columns(bits).astype(np.int64) << i
        return table

    def trajectory(self, state: int, max_steps: int) -> Iterator[int]:
        """Yield ``state`` followed by up to ``max_steps`` successors."""
        yield state
        for _ in range(max_steps):
            state = self.transition(state)
            yield state

    def simulate(self, state: int, steps: int = 1) -> int:
        for _ in range(steps):
            state = self.transition(state)
        return state

    def regulators(self, index: int) -> Tuple[int, ...]:
        return tuple(sorted(self.expressions[index].variables()))

    def edges(self) -> List[Tuple[str, str]]:
        """(source id, target id) for every regulator reference, self-loops included."""
        out = []
        for target in self.nodes:
            if target.index in self.default_nodes:
                continue
            for src in self.regulators(target.index):
                out.append((self.nodes[src].id, target.id))
        return out

    def rules_text(self) -> List[str]:
        names = self.node_order
        return [f"{n.id} = {self.expressions[n.index].to_text(names)}" for n in self.nodes]

def _rule_target(rule_text: str) -> Optional[str]:
    if rule_text.count("=") != 1:
        return None
    lhs = rule_text.split("=")[0].strip()
    return lhs or None

def build_nodes(nodes: Optional[Sequence[NodeLike]], rules: Sequence[str]) -> List[Node]:
    """Assign indices by first-seen order of ``nodes``, else of rule targets."""
    if nodes is None:
        raw: List[Tuple[str, str]] = []
        for rule in rules:
            target = _rule_target(rule)
            if target is not None:
                raw.append((target, target))
    else:
        raw = []
        for node in nodes:
            if isinstance(node, Node):
                raw.append((node.id, node.label))
            elif isinstance(node, str):
                raw.append((node, node))
            else:
                node_id = str(node["id"])
                raw.append((node_id, node.get("label") or node_id))

    out: List[Node] = []
    seen = set()
    for node_id, label in raw:
        if node_id in seen:
            continue
        seen.add(node_id)
        label = (label or "").strip() or node_id
        out.append(Node(id=node_id, label=label, index=len(out)))
    return out

def compile_network(nodes: Optional[Sequence[NodeLike]], rules: Sequence[str]) -> BooleanNetwork:
    """Parse every rule; the first failure raises before anything is simulated.

    Blank rule strings are ignored.
    """
    rules = [r for r in rules if r and r.strip()]
    node_list = build_nodes(nodes, rules)
    index_of = {n.id: n.index for n in node_list}

    expressions: Dict[int, Expression] = {}
    for rule in rules:
        parsed = parse_rule(rule, index_of)
        idx = index_of[parsed.target]
        if idx in expressions:
            raise ParseError(f"duplicate rule for node {parsed.target!r}", rule)
        expressions[idx] = parsed.expression

    defaults = [n.index for n in node_list if n.index not in expressions]
    if defaults:
        logger.debug("nodes without rules keep their value: %s", [node_list[i].id for i in defaults])
    ordered = [expressions.get(n.index, Variable(n.index)) for n in node_list]
    return BooleanNetwork(node_list, ordered, default_nodes=defaults)
