from __future__ import annotations
from enum import Enum
from typing import List, Tuple

from rollstats.core.ports.reconstructor import Buffer, Reconstructor, as_byte_view


class CopyingReconstructor(Reconstructor):
    """Reconstructor handing out owned copies of every record.

    A boundary record is assembled in a scratch buffer from the pending tail
    and the head of the chunk. Every record is returned as `bytes`, so the
    caller may keep records after the chunk is reused.
    """

    def ingest(self, tail: Buffer, chunk) -> Tuple[List[bytes], bytes]:
        self._check_tail(tail)
        width = self.record_width
        raw = as_byte_view(chunk)

        if len(tail) + len(raw) < width:
            return [], bytes(tail) + raw.tobytes()

        offset = width - len(tail) if len(tail) else 0

        records: List[bytes] = []
        if offset > 0:
            scratch = bytearray(tail)
            scratch += raw[:offset]
            records.append(bytes(scratch))

        body = raw[offset:]
        complete = len(body) - len(body) % width
        for start in range(0, complete, width):
            records.append(body[start : start + width].tobytes())

        return records, body[complete:].tobytes()


class SliceReconstructor(Reconstructor):
    """Reconstructor decoding straight out of the caller's chunk.

    Records lying wholly inside the chunk are returned as `memoryview`
    slices of it, so they are only valid while the chunk is. `ingest` copies
    the given tail into fresh storage. `consume` appends to the owned tail
    instead, so it copies at most W-1 bytes to finish a boundary record (the
    tail storage becomes that record) and at most W-1 bytes to save the new
    trailing partial record.
    """

    def ingest(self, tail: Buffer, chunk) -> Tuple[List[Buffer], bytearray]:
        self._check_tail(tail)
        return self._split(bytearray(tail), chunk)

    def _advance(self, chunk) -> Tuple[List[Buffer], bytearray]:
        tail = self._tail
        return self._split(tail if isinstance(tail, bytearray) else bytearray(tail), chunk)

    def _split(self, storage: bytearray, chunk) -> Tuple[List[Buffer], bytearray]:
        width = self.record_width
        raw = as_byte_view(chunk)

        if len(storage) + len(raw) < width:
            storage += raw
            return [], storage

        offset = width - len(storage) if len(storage) else 0

        records: List[Buffer] = []
        if offset > 0:
            storage += raw[:offset]
            records.append(storage)

        remainder = (len(raw) - offset) % width
        end = len(raw) - remainder
        for start in range(offset, end, width):
            records.append(raw[start : start + width])

        return records, bytearray(raw[end:])


class ReconstructorStrategy(Enum):
    COPYING = "copying"
    SLICE = "slice"

    def to_str(self) -> str:
        return self.value

    def build(self, record_width: int) -> Reconstructor:
        if self == ReconstructorStrategy.COPYING:
            return CopyingReconstructor(record_width)
        return SliceReconstructor(record_width)

    @classmethod
    def parse(cls, value) -> ReconstructorStrategy:
        """
        Converts enum or string into a ReconstructorStrategy.
        Accepts: SLICE, "slice", "COPYING", "copy", etc.
        """
        if isinstance(value, ReconstructorStrategy):
            return value

        if isinstance(value, str):
            v = value.strip().lower()
            if v in ("copy", "copying"):
                return cls.COPYING
            if v in ("slice", "slice_direct", "slice-direct", "direct"):
                return cls.SLICE
            raise ValueError(f"Invalid reconstructor strategy: '{value}'")

        raise TypeError(f"Cannot parse reconstructor strategy from value: {value!r}")
