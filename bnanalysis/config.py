from dataclasses import dataclass

DEFAULT_STATE_CAP = 2 ** 17
DEFAULT_STEP_CAP = 2 ** 17

@dataclass(frozen=True)
class AnalysisConfig:
    """Caps and thresholds for one attractor analysis.

    state_cap bounds the number of start states (0 .. state_cap-1) and
    step_cap bounds the length of a single trajectory walk. Both default to
    2**17, so every network up to 17 nodes is enumerated exhaustively.
    """
    state_cap: int = DEFAULT_STATE_CAP
    step_cap: int = DEFAULT_STEP_CAP
    size_warning_nodes: int = 20
    table_max_states: int = 2 ** 20

    def __post_init__(self):
        if self.state_cap < 1:
            raise ValueError(f"state_cap must be positive, got {self.state_cap}")
        if self.step_cap < 1:
            raise ValueError(f"step_cap must be positive, got {self.step_cap}")
