from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from bnanalysis.config import AnalysisConfig
from bnanalysis.errors import AnalysisWarning, WarningKind
from bnanalysis.network import BooleanNetwork

logger = logging.getLogger(__name__)

CancelFn = Callable[[], bool]

class StateStatus(Enum):
    UNVISITED = "unvisited"
    TRANSIENT = "transient"
    MEMBER = "member"

@dataclass
class Detection:
    cycles: List[Tuple[int, ...]] = field(default_factory=list)
    basin_sizes: List[int] = field(default_factory=list)
    status: Dict[int, Tuple[StateStatus, int]] = field(default_factory=dict)
    start_limit: int = 0
    abandoned: Set[int] = field(default_factory=set)   # states on walks cut off by the step cap
    cancelled: bool = False
    warnings: List[AnalysisWarning] = field(default_factory=list)

    def status_of(self, state: int) -> Tuple[StateStatus, Optional[int]]:
        return self.status.get(state, (StateStatus.UNVISITED, None))

    @property
    def classified_state_count(self) -> int:
        return len(self.status)

    @property
    def explored_state_count(self) -> int:
        """Start candidates that ended up classified."""
        return sum(1 for s in range(self.start_limit) if s in self.status)

    @property
    def unresolved_state_count(self) -> int:
        """Distinct states left unclassified by step-cap aborts."""
        return sum(1 for s in self.abandoned if s not in self.status)

def _successor_fn(network: BooleanNetwork, config: AnalysisConfig) -> Callable[[int], int]:
    # tabulate only when the whole space is small and will be walked from every start
    total = network.total_states
    if total <= config.table_max_states and total <= config.state_cap:
        table = network.transition_table()
        return lambda s: int(table[s])
    return network.transition

def detect_attractors(network: BooleanNetwork, config: Optional[AnalysisConfig] = None,
                      should_cancel: Optional[CancelFn] = None) -> Detection:
    """Classify states of the synchronous transition graph by attractor.

    Start states are taken in ascending order below ``state_cap``. A walk ends
    when it reaches a classified state (the path joins that basin) or revisits
    one of its own states (the cycle is a new attractor, the states before it
    its transient). Every state is simulated at most once.
    """
    cfg = config or AnalysisConfig()
    total = network.total_states
    out = Detection(start_limit=min(total, cfg.state_cap))
    successor = _successor_fn(network, cfg)
    status = out.status
    logger.debug("detecting attractors: %d nodes, %d start states, step cap %d",
                 len(network), out.start_limit, cfg.step_cap)

    for start in range(out.start_limit):
        if should_cancel is not None and should_cancel():
            out.cancelled = True
            break
        if start in status:
            continue

        path: List[int] = []
        position: Dict[int, int] = {}
        current = start
        while True:
            if should_cancel is not None and should_cancel():
                out.cancelled = True
                break

            known = status.get(current)
            if known is not None:
                attractor_id = known[1]
                for s in path:
                    status[s] = (StateStatus.TRANSIENT, attractor_id)
                out.basin_sizes[attractor_id] += len(path)
                break

            if current in position:
                entry = position[current]
                attractor_id = len(out.cycles)
                cycle = tuple(path[entry:])
                out.cycles.append(cycle)
                out.basin_sizes.append(len(path))
                for s in path[:entry]:
                    status[s] = (StateStatus.TRANSIENT, attractor_id)
                for s in cycle:
                    status[s] = (StateStatus.MEMBER, attractor_id)
                logger.debug("attractor %d: period %d, entered at state %d", attractor_id, len(cycle), current)
                break

            if len(path) >= cfg.step_cap:
                out.abandoned.update(path)
                msg = (f"step cap of {cfg.step_cap} reached while following state "
                       f"{network.codec.binary(start)}; {len(path)} states left unclassified")
                logger.warning(msg)
                out.warnings.append(AnalysisWarning(WarningKind.STEP_CAP, msg))
                break

            position[current] = len(path)
            path.append(current)
            current = successor(current)

        if out.cancelled:
            break

    return out
