from __future__ import annotations
from typing import List, Optional
import logging
import numpy as np

from rollstats.core.domain.encoding import I32_BE, parse_encoding
from rollstats.core.domain.errors import EmptyWindowError, MalformedRecordError
from rollstats.core.domain.params.window_params import WindowParams
from rollstats.core.domain.snapshot import Snapshot
from rollstats.core.ports.codec import CodecPort
from rollstats.core.ports.reconstructor import Reconstructor
from rollstats.core.services.reconstructor import ReconstructorStrategy
from rollstats.core.services.window import SlidingWindow

logger = logging.getLogger(__name__)


class RollingStats:
    """Rolling statistics over a raw byte stream of fixed-width records.

    Bytes are pushed with `write` (so the object can stand in for a binary
    file opened for writing), completed records are decoded and admitted into
    a sliding window of the last `capacity` values.

    Args:
        capacity: Number of records kept in the window.
        encoding: Record codec, or the name of a built-in encoding.
        strategy: Reconstructor strategy used to split the stream.
        recompute_every: Evictions between exact recomputations of the sums.

    Use example

        stats = RollingStats(3, encoding="i32_be")
        stats.write(bytes([0, 0, 0, 1, 0, 0, 0, 2, 0, 0, 0, 3, 0, 0, 0, 4]))
        stats.mean()     # 3.0
        stats.std_dev()  # 1.0
    """

    def __init__(
        self,
        capacity: int,
        encoding: CodecPort | str = I32_BE,
        strategy: ReconstructorStrategy | str = ReconstructorStrategy.SLICE,
        recompute_every: Optional[int] = None,
    ):
        self.window = SlidingWindow(capacity, recompute_every)
        self.codec: CodecPort = (
            parse_encoding(encoding) if isinstance(encoding, str) else encoding
        )
        self.strategy = ReconstructorStrategy.parse(strategy)
        self.reconstructor: Reconstructor = self.strategy.build(self.codec.width)

    @classmethod
    def from_params(cls, params: WindowParams) -> RollingStats:
        return cls(
            capacity=params.capacity,
            encoding=params.encoding,
            strategy=params.strategy,
            recompute_every=params.recompute_every,
        )

    def write(self, chunk) -> int:
        """
        Accept raw bytes and admit every record they complete.

        Returns:
            The number of bytes accepted, always the full chunk length.

        Raises:
            MalformedRecordError: after the whole chunk was processed, when at
            least one completed record failed to decode. Valid records of the
            same chunk are still admitted.
        """
        first_index = self.reconstructor.records_emitted
        records = self.reconstructor.consume(chunk)

        values: List[float] = []
        malformed: List[int] = []
        reason = None
        for i, raw in enumerate(records):
            try:
                values.append(self.codec.decode(raw))
            except MalformedRecordError as e:
                offset = self.reconstructor.record_offset(first_index + i)
                malformed.append(offset)
                reason = reason or e.reason
                logger.warning("Skipping malformed record at offset %d: %s", offset, e.reason)
        self.window.extend(values)

        if malformed:
            raise MalformedRecordError(malformed, reason)

        return memoryview(chunk).nbytes

    def flush(self):
        pass

    def snapshot(self) -> Optional[Snapshot]:
        """Current statistics, None while no record has been admitted."""
        return self.window.snapshot()

    def _require(self) -> Snapshot:
        snap = self.window.snapshot()
        if snap is None:
            raise EmptyWindowError("no records in the window")
        return snap

    def mean(self) -> float:
        return self._require().mean

    def variance(self) -> float:
        return self._require().variance

    def std_dev(self) -> float:
        return self._require().std_dev

    def min(self) -> float:
        return self._require().min

    def max(self) -> float:
        return self._require().max

    def rand(self, rng: Optional[np.random.Generator] = None) -> float:
        """Draw from a normal distribution fitted to the window."""
        snap = self._require()
        rng = rng if rng is not None else np.random.default_rng()
        return float(rng.normal(snap.mean, snap.std_dev))

    def values(self) -> np.ndarray:
        return self.window.values()

    @property
    def pending(self) -> int:
        """Bytes waiting for the rest of their record."""
        return self.reconstructor.pending

    @property
    def capacity(self) -> int:
        return self.window.capacity

    def __len__(self):
        return len(self.window)
