from __future__ import annotations
import numpy as np

def safe_div(a, b):
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    out = np.full_like(a, np.nan, dtype=float)
    m = (b != 0) & ~np.isnan(a) & ~np.isnan(b)
    out[m] = a[m] / b[m]
    return out

def safe_nanmean(x) -> float:
    """nanmean that returns nan instead of warning on empty input."""
    arr = np.asarray(list(x), dtype=float).ravel()
    if not arr.size or np.isnan(arr).all():
        return float("nan")
    return float(np.nanmean(arr))

def shannon_entropy(weights) -> float:
    """Entropy (nats) of a non-negative weight vector, normalised to a distribution."""
    w = np.asarray(list(weights), dtype=float)
    w = w[w > 0]
    if not w.size:
        return float("nan")
    p = w / w.sum()
    return float(-np.sum(p * np.log(p)))
