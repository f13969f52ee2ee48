from collections import deque
from typing import Deque, Iterator, Optional
import math
import numpy as np

from rollstats.core.domain.errors import CapacityError, EmptyWindowError
from rollstats.core.domain.snapshot import Snapshot
from rollstats.core.services.extrema import Extremum, MonotonicDeque

# the variance numerator may not fall below this fraction of the squared
# deviation mass moved through the sums since the last recomputation
CANCELLATION_RATIO = 1e-3


def validate_capacity(capacity) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, (int, np.integer)):
        raise CapacityError(f"capacity must be an integer, got {capacity!r}")
    if capacity <= 0:
        raise CapacityError(f"capacity must be positive, got {capacity}")
    return int(capacity)


class SlidingWindow:
    """Fixed capacity FIFO of values with O(1) amortized statistics.

    Args:
        capacity: Maximum number of values kept; the oldest is evicted first.
        recompute_every: Evictions between exact recomputations of the running
            sums. Defaults to `capacity`.

    NOTES:
      Sums are kept over `value - shift` where `shift` is a value of the
      window. A recomputation re-anchors it to the value closest to the mean.
      Besides the periodic recomputation, the sums are rebuilt as soon as
      `count*S2 - S1**2` drops below CANCELLATION_RATIO times the squared
      deviations added and removed since the last rebuild (a level shift, or
      an evicted outlier). That keeps the variance within 1e-9
      relative of an exact recomputation.
    """

    def __init__(self, capacity: int, recompute_every: Optional[int] = None):
        self.capacity = validate_capacity(capacity)
        if recompute_every is None:
            recompute_every = self.capacity
        if recompute_every <= 0:
            raise ValueError(f"recompute_every must be positive, got {recompute_every}")
        self.recompute_every = int(recompute_every)

        self._values: Deque[float] = deque()
        self._maxq = MonotonicDeque(Extremum.MAX)
        self._minq = MonotonicDeque(Extremum.MIN)
        # arrival index of the next admitted value
        self._next_index = 0
        self._shift: Optional[float] = None
        self._sum = 0.0
        self._sum_sq = 0.0
        # squared deviations added or removed since the last rebuild
        self._mass = 0.0
        self._evictions = 0

    def admit(self, value: float) -> Optional[float]:
        """Append `value`, evicting the oldest value first when full.

        Returns:
            The evicted value, or None.
        """
        value = float(value)
        evicted = self.evict() if len(self._values) == self.capacity else None

        if self._shift is None:
            self._shift = value
        d = value - self._shift
        self._sum += d
        self._sum_sq += d * d
        self._mass += d * d

        self._values.append(value)
        self._maxq.push(self._next_index, value)
        self._minq.push(self._next_index, value)
        self._next_index += 1
        self._check_cancellation()
        return evicted

    def extend(self, values) -> int:
        n = 0
        for v in values:
            self.admit(v)
            n += 1
        return n

    def evict(self) -> float:
        """Remove and return the oldest value."""
        if not self._values:
            raise EmptyWindowError("cannot evict from an empty window")

        index = self._next_index - len(self._values)
        value = self._values.popleft()
        self._maxq.expire(index)
        self._minq.expire(index)

        if not self._values:
            self._reset_sums()
            return value

        d = value - self._shift
        self._sum -= d
        self._sum_sq -= d * d
        self._mass += d * d

        self._evictions += 1
        if self._evictions >= self.recompute_every:
            self.recompute()
        else:
            self._check_cancellation()
        return value

    def recompute(self):
        """Rebuild the running sums from the window contents."""
        self._evictions = 0
        if not self._values:
            self._reset_sums()
            return

        # a window value keeps integer data exact; the one closest to the
        # mean keeps the shifted sums small
        mean = math.fsum(self._values) / len(self._values)
        shift = min(self._values, key=lambda v: abs(v - mean))
        self._shift = shift
        self._sum = math.fsum(v - shift for v in self._values)
        self._sum_sq = math.fsum((v - shift) ** 2 for v in self._values)
        self._mass = self._sum_sq

    def _check_cancellation(self):
        n = len(self._values)
        if n < 2 or self._mass == 0.0:
            return
        if n * self._sum_sq - self._sum * self._sum < CANCELLATION_RATIO * n * self._mass:
            self.recompute()

    def snapshot(self) -> Optional[Snapshot]:
        """Current statistics, or None when the window is empty."""
        if not self._values:
            return None
        return Snapshot.from_moments(
            count=len(self._values),
            shift=self._shift,
            total=self._sum,
            total_sq=self._sum_sq,
            lo=self._minq.front_value,
            hi=self._maxq.front_value,
        )

    @property
    def min(self) -> Optional[float]:
        return self._minq.front_value

    @property
    def max(self) -> Optional[float]:
        return self._maxq.front_value

    @property
    def is_full(self) -> bool:
        return len(self._values) == self.capacity

    def values(self) -> np.ndarray:
        """Window contents, oldest first."""
        return np.fromiter(self._values, dtype=float, count=len(self._values))

    def clear(self):
        self._values.clear()
        self._maxq.clear()
        self._minq.clear()
        self._reset_sums()

    def _reset_sums(self):
        self._shift = None
        self._sum = 0.0
        self._sum_sq = 0.0
        self._mass = 0.0
        self._evictions = 0

    def __len__(self):
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(list(self._values))
