from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time statistics of the records inside a window.

    `variance` is the sample variance (divisor count - 1). A single record
    has variance 0.0.
    """

    count: int
    sum: float
    mean: float
    variance: float
    min: float
    max: float

    @property
    def std_dev(self) -> float:
        return math.sqrt(self.variance)

    @property
    def population_variance(self) -> float:
        if self.count < 2:
            return 0.0
        return self.variance * (self.count - 1) / self.count

    @property
    def spread(self) -> float:
        return self.max - self.min

    @staticmethod
    def from_moments(
        count: int, shift: float, total: float, total_sq: float, lo: float, hi: float
    ) -> "Snapshot":
        """Build a snapshot from sums of `x - shift` and `(x - shift)**2`."""
        if count < 2:
            variance = 0.0
        else:
            # single rounding at the end: exact for integer data
            variance = max(0.0, (count * total_sq - total * total) / (count * (count - 1)))
        return Snapshot(
            count=count,
            sum=shift * count + total,
            mean=shift + total / count,
            variance=variance,
            min=lo,
            max=hi,
        )
