from typing import List, Optional


class RollStatsError(Exception):
    """Base class for every error raised by rollstats."""


class MalformedRecordError(RollStatsError, ValueError):
    """A completed record could not be decoded into a valid number.

    Args:
        offsets: Stream byte offsets of the offending records, in arrival order.
        reason: Human readable cause (first failure).
    """

    def __init__(self, offsets: List[int], reason: str = "malformed record"):
        self.offsets = list(offsets)
        self.reason = reason
        super().__init__(self._message())

    @property
    def offset(self) -> Optional[int]:
        """Offset of the first malformed record, None when unknown."""
        return self.offsets[0] if self.offsets else None

    def _message(self) -> str:
        if not self.offsets:
            return self.reason
        if len(self.offsets) == 1:
            return f"{self.reason} at byte offset {self.offsets[0]}"
        return f"{self.reason} at byte offsets {self.offsets}"


class CapacityError(RollStatsError, ValueError):
    """Window capacity is not a positive integer."""


class EmptyWindowError(RollStatsError, LookupError):
    """Operation needs at least one record in the window."""
