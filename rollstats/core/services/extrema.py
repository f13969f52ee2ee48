from collections import deque
from enum import Enum, auto
from typing import Deque, Iterator, Optional, Tuple


class Extremum(Enum):
    MIN = auto()
    MAX = auto()


class MonotonicDeque:
    """Sliding window extremum over values keyed by arrival index.

    Candidates are kept front to back in arrival order with values
    non-increasing (MAX) or non-decreasing (MIN), so the front is always the
    extreme of the live window. Each index is pushed and popped at most once,
    which makes push/expire O(1) amortized.

    Use example

        maxq = MonotonicDeque(Extremum.MAX)
        for i, v in enumerate([5, 1, 9, 4]):
            maxq.push(i, v)
        maxq.front_value  # 9
        maxq.expire(2)    # index 2 leaves the window
        maxq.front_value  # 4
    """

    def __init__(self, kind: Extremum):
        self.kind = kind
        self._candidates: Deque[Tuple[int, float]] = deque()

    def _dominates(self, new: float, old: float) -> bool:
        if self.kind == Extremum.MAX:
            return new >= old
        return new <= old

    def push(self, index: int, value: float):
        candidates = self._candidates
        while candidates and self._dominates(value, candidates[-1][1]):
            candidates.pop()
        candidates.append((index, value))

    def expire(self, index: int):
        """Drop the candidate for `index` if it is the current front."""
        if self._candidates and self._candidates[0][0] == index:
            self._candidates.popleft()

    @property
    def front(self) -> Optional[Tuple[int, float]]:
        return self._candidates[0] if self._candidates else None

    @property
    def front_value(self) -> Optional[float]:
        return self._candidates[0][1] if self._candidates else None

    def clear(self):
        self._candidates.clear()

    def __len__(self):
        return len(self._candidates)

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        return iter(self._candidates)
