from __future__ import annotations
import logging
from typing import Optional, Sequence, Union

from bnanalysis.assembler import assemble_result, empty_result
from bnanalysis.config import AnalysisConfig
from bnanalysis.detector import CancelFn, detect_attractors
from bnanalysis.errors import RuleError
from bnanalysis.model import AnalysisFailure, AnalysisResult, NetworkSpec
from bnanalysis.network import BooleanNetwork, NodeLike, compile_network

logger = logging.getLogger(__name__)

Outcome = Union[AnalysisResult, AnalysisFailure]

def analyze_compiled(network: BooleanNetwork, config: Optional[AnalysisConfig] = None,
                     should_cancel: Optional[CancelFn] = None) -> AnalysisResult:
    cfg = config or AnalysisConfig()
    if len(network) == 0:
        return empty_result()
    detection = detect_attractors(network, cfg, should_cancel=should_cancel)
    result = assemble_result(network, detection, cfg)
    logger.debug("found %d attractors over %d classified states",
                 len(result.attractors), result.classified_state_count)
    return result

def analyze_network(nodes: Optional[Sequence[NodeLike]], rules: Sequence[str],
                    config: Optional[AnalysisConfig] = None,
                    should_cancel: Optional[CancelFn] = None) -> Outcome:
    """Find every attractor of a synchronous Boolean network.

    ``nodes`` fixes the node order (ids, ``{id, label}`` mappings or Node
    objects); ``None`` orders nodes by the first appearance of each rule
    target. Returns an AnalysisFailure, never a partial result, when any rule
    fails to parse.
    """
    try:
        network = compile_network(nodes, rules)
    except RuleError as e:
        logger.debug("rule compilation failed: %s", e)
        return AnalysisFailure(error=e)
    return analyze_compiled(network, config, should_cancel=should_cancel)

def analyze_spec(spec: NetworkSpec, config: Optional[AnalysisConfig] = None,
                 should_cancel: Optional[CancelFn] = None) -> Outcome:
    return analyze_network(spec.nodes, spec.rules, config=config, should_cancel=should_cancel)
