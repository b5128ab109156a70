from __future__ import annotations
from typing import List, Optional, Sequence

from bnanalysis.config import AnalysisConfig
from bnanalysis.detector import Detection
from bnanalysis.errors import AnalysisWarning, WarningKind
from bnanalysis.model import AnalysisResult, Attractor, AttractorType
from bnanalysis.network import BooleanNetwork

def size_warnings(n_nodes: int, config: AnalysisConfig) -> List[AnalysisWarning]:
    if n_nodes <= config.size_warning_nodes:
        return []
    return [AnalysisWarning(
        WarningKind.SIZE,
        f"network has {n_nodes} nodes; its state space grows as 2^{n_nodes} = {1 << n_nodes} states "
        f"and enumeration beyond {config.size_warning_nodes} nodes is expensive",
    )]

def empty_result(message: str = "No nodes supplied; analysis skipped.") -> AnalysisResult:
    return AnalysisResult(
        node_order=(),
        node_labels={},
        attractors=(),
        explored_state_count=0,
        classified_state_count=0,
        total_state_space=0,
        truncated=False,
        unresolved_state_count=0,
        basin_denominator=0,
        warnings=(AnalysisWarning(WarningKind.NO_NODES, message),),
    )

def assemble_result(network: BooleanNetwork, detection: Detection, config: AnalysisConfig,
                    extra_warnings: Optional[Sequence[AnalysisWarning]] = None) -> AnalysisResult:
    total = network.total_states
    truncated = config.state_cap < total
    classified = detection.classified_state_count

    warnings: List[AnalysisWarning] = list(extra_warnings or [])
    warnings.extend(size_warnings(len(network), config))
    if truncated:
        warnings.append(AnalysisWarning(
            WarningKind.TRUNCATION,
            f"state space truncated to {detection.start_limit} of {total} states",
        ))
    warnings.extend(detection.warnings)

    denominator = classified if truncated else total
    if truncated:
        warnings.append(AnalysisWarning(
            WarningKind.BASIN_DENOMINATOR,
            f"basin shares are relative to the {classified} classified states, "
            f"not the full state space of {total} states",
        ))
    if detection.cancelled:
        warnings.append(AnalysisWarning(
            WarningKind.CANCELLED,
            f"analysis cancelled after classifying {classified} of {total} states",
        ))

    node_order = network.node_order
    labels = network.node_labels
    codec = network.codec
    attractors = []
    for attractor_id, cycle in enumerate(detection.cycles):
        basin = detection.basin_sizes[attractor_id]
        attractors.append(Attractor(
            id=attractor_id,
            type=AttractorType.FIXED_POINT if len(cycle) == 1 else AttractorType.LIMIT_CYCLE,
            period=len(cycle),
            states=cycle,
            basin_size=basin,
            basin_share=basin / denominator if denominator else 0.0,
            snapshots=tuple(codec.format(s, node_order, labels) for s in cycle),
        ))
    attractors.sort(key=lambda a: a.id)

    return AnalysisResult(
        node_order=node_order,
        node_labels=labels,
        attractors=tuple(attractors),
        explored_state_count=detection.explored_state_count,
        classified_state_count=classified,
        total_state_space=total,
        truncated=truncated,
        unresolved_state_count=detection.unresolved_state_count,
        basin_denominator=denominator,
        cancelled=detection.cancelled,
        warnings=tuple(warnings),
    )
