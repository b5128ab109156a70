from __future__ import annotations
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional, Sequence

from bnanalysis.analysis import Outcome, analyze_network
from bnanalysis.config import AnalysisConfig
from bnanalysis.detector import CancelFn
from bnanalysis.network import NodeLike

def deadline_after(seconds: float) -> CancelFn:
    """Cancel check that turns true once ``seconds`` have elapsed."""
    limit = time.monotonic() + seconds
    return lambda: time.monotonic() >= limit

class AnalysisJob:
    """Handle on an analysis running off the caller's thread."""

    def __init__(self, future: Future, stop: threading.Event):
        self._future = future
        self._stop = stop

    def cancel(self):
        """Ask the running analysis to stop at its next loop check."""
        self._stop.set()

    @property
    def cancel_requested(self) -> bool:
        return self._stop.is_set()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> Outcome:
        return self._future.result(timeout=timeout)

def analyze_in_background(nodes: Optional[Sequence[NodeLike]], rules: Sequence[str],
                          config: Optional[AnalysisConfig] = None,
                          time_limit: Optional[float] = None,
                          executor: Optional[Executor] = None) -> AnalysisJob:
    stop = threading.Event()
    deadline = deadline_after(time_limit) if time_limit is not None else None

    def should_cancel() -> bool:
        return stop.is_set() or (deadline is not None and deadline())

    if executor is not None:
        future = executor.submit(analyze_network, nodes, list(rules), config, should_cancel)
    else:
        own = ThreadPoolExecutor(max_workers=1)
        future = own.submit(analyze_network, nodes, list(rules), config, should_cancel)
        own.shutdown(wait=False)
    return AnalysisJob(future, stop)
