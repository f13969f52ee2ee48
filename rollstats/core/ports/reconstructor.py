from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple, Union

Buffer = Union[bytes, bytearray, memoryview]


class Reconstructor(ABC):
    """Turns arbitrarily chunked raw bytes into complete fixed-width records.

    Subclasses implement `ingest`, a pure step over (pending tail, chunk).
    The base class owns the pending tail between calls and keeps track of
    stream offsets so callers can locate a record in the byte stream.

    Args:
        record_width: Size in bytes of one record (W).
    """

    def __init__(self, record_width: int):
        if isinstance(record_width, bool) or not isinstance(record_width, int):
            raise TypeError(f"record_width must be an int, got {record_width!r}")
        if record_width <= 0:
            raise ValueError(f"record_width must be positive, got {record_width}")
        self.record_width = record_width
        self._tail: Buffer = b""
        self._records_emitted = 0
        self._stream_offset = 0
        # where the record numbered `_base_index` starts; moved by reset()
        self._base_index = 0
        self._base_offset = 0

    @abstractmethod
    def ingest(self, tail: Buffer, chunk) -> Tuple[List[Buffer], Buffer]:
        """
        Split `tail + chunk` into complete records and a new tail.

        Args:
            tail: Bytes left over from the previous call, len(tail) < W.
            chunk: New raw data, any object supporting the buffer protocol.

        Returns:
            (records, new_tail) where every record is exactly W bytes long
            and len(new_tail) < W.
        """
        pass

    def consume(self, chunk) -> List[Buffer]:
        """Feed `chunk` and return the records it completes."""
        records, self._tail = self._advance(chunk)
        self._records_emitted += len(records)
        self._stream_offset += _nbytes(chunk)
        return records

    def _advance(self, chunk) -> Tuple[List[Buffer], Buffer]:
        # the owned tail is never visible to callers, so subclasses may
        # reuse its storage here
        return self.ingest(self._tail, chunk)

    def record_offset(self, index: int) -> int:
        """Stream byte offset of the `index`-th record ever produced.

        Counted from the stream offset of the last `reset()`, so only records
        completed since then are located correctly.
        """
        return self._base_offset + (index - self._base_index) * self.record_width

    @property
    def records_emitted(self) -> int:
        return self._records_emitted

    @property
    def stream_offset(self) -> int:
        """Total number of bytes accepted so far."""
        return self._stream_offset

    @property
    def tail(self) -> bytes:
        return bytes(self._tail)

    @property
    def pending(self) -> int:
        return len(self._tail)

    def reset(self):
        """Discard the pending tail; the next record starts at `stream_offset`."""
        self._tail = b""
        self._base_index = self._records_emitted
        self._base_offset = self._stream_offset

    def _check_tail(self, tail: Sequence):
        if len(tail) >= self.record_width:
            raise ValueError(
                f"pending tail of {len(tail)} bytes must be shorter than {self.record_width}"
            )


def as_byte_view(chunk) -> memoryview:
    """Flat unsigned byte view over any buffer."""
    view = memoryview(chunk)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _nbytes(chunk) -> int:
    return memoryview(chunk).nbytes
