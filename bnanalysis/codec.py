from __future__ import annotations
from typing import Mapping, Optional, Sequence

import numpy as np

from bnanalysis.model import StateSnapshot

class StateCodec:
    """Fixed bit layout between per-node Boolean vectors and integer states.

    Bit ``i`` of the integer is the value of node ``i``.
    """

    def __init__(self, n_nodes: int):
        if n_nodes < 0:
            raise ValueError(f"n_nodes must be non-negative, got {n_nodes}")
        self.n_nodes = n_nodes
        self.total_states = 1 << n_nodes

    def _check(self, state: int):
        if not 0 <= state < self.total_states:
            raise ValueError(f"state {state} outside [0, {self.total_states})")

    def encode(self, bits: Sequence[int]) -> int:
        if len(bits) != self.n_nodes:
            raise ValueError(f"expected {self.n_nodes} bits, got {len(bits)}")
        state = 0
        for i, bit in enumerate(bits):
            if bit:
                state |= 1 << i
        return state

    def decode(self, state: int) -> np.ndarray:
        self._check(state)
        return np.array([(state >> i) & 1 for i in range(self.n_nodes)], dtype=np.uint8)

    def binary(self, state: int) -> str:
        self._check(state)
        return format(state, "b").zfill(self.n_nodes) if self.n_nodes else ""

    def bit_matrix(self) -> np.ndarray:
        """(2**n, n) bool matrix; row s is decode(s)."""
        states = np.arange(self.total_states, dtype=np.uint32 if self.n_nodes <= 32 else np.uint64)
        out = np.empty((self.total_states, self.n_nodes), dtype=bool)
        for i in range(self.n_nodes):
            out[:, i] = (states >> i) & 1
        return out

    def format(self, state: int, node_order: Sequence[str],
               labels: Optional[Mapping[str, str]] = None) -> StateSnapshot:
        bits = self.decode(state)
        ids = set(node_order)
        values = {}
        for i, node_id in enumerate(node_order):
            values[node_id] = int(bits[i])
            label = labels.get(node_id) if labels else None
            # a label equal to another node's id must not overwrite that node's bit
            if label and label not in ids:
                values[label] = int(bits[i])
        return StateSnapshot(state=state, binary=self.binary(state), values=values)
