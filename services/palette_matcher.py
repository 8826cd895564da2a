from __future__ import annotations
import math

from domain.dtos import Palette
from services.color_distance import ciede2000


def palette_score(candidate: Palette, query: Palette, tolerance: float = 20.0) -> float:
    """Score in [0, 1] for how well ``candidate`` covers the ``query`` palette.

    Each query swatch takes its closest candidate color (CIEDE2000) and turns
    the distance into a similarity with ``exp(-dE / max(1, tolerance))``. The
    result is the query-weighted mean of those similarities. Candidate colors
    that match nothing in the query do not lower the score.
    """
    if candidate.is_empty() or query.is_empty():
        return 0.0

    kernel = max(1.0, tolerance)
    total_weight = 0.0
    accum = 0.0
    for q in query.colors:
        q_lab = q.lab
        best = min(ciede2000(p.lab, q_lab) for p in candidate.colors)
        s = math.exp(-best / kernel)
        w = max(0.0, min(1.0, q.weight))
        accum += s * w
        total_weight += w
    return accum / total_weight if total_weight > 0 else 0.0
