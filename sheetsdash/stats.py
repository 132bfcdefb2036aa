from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable

import numpy as np


@dataclass(frozen=True)
class ResolutionStats:
    min: float = 0.0
    median: float = 0.0
    max: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def summarize(values: Iterable[float]) -> ResolutionStats:
    """Min/median/max of ``values``; all zeros for an empty sequence.

    ``np.sort`` returns a new array, so the caller's sequence keeps its order.
    """
    arr = np.sort(np.asarray(list(values), dtype=float))
    if arr.size == 0:
        return ResolutionStats()
    mid = arr.size // 2
    if arr.size % 2 == 0:
        median = (arr[mid - 1] + arr[mid]) / 2
    else:
        median = arr[mid]
    return ResolutionStats(min=float(arr[0]), median=float(median), max=float(arr[-1]))
