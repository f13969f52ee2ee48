from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict
import math
import struct

from rollstats.core.ports.codec import CodecPort
from rollstats.core.domain.errors import MalformedRecordError


@dataclass(frozen=True)
class RecordEncoding(CodecPort):
    """Fixed width numeric record backed by a `struct` format.

    Example:
        F32_LE = RecordEncoding("f32_le", "<f")
        F32_LE.decode(b"\\x00\\x00\\x80\\x3f")  # 1.0
    """

    name: str
    fmt: str
    _struct: struct.Struct = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_struct", struct.Struct(self.fmt))

    @property
    def width(self) -> int:
        return self._struct.size

    @property
    def is_float(self) -> bool:
        return self.fmt[-1] in "efd"

    @property
    def is_signed(self) -> bool:
        return self.fmt[-1] in "bhilq"

    def value_range(self) -> tuple[float, float]:
        """Smallest and largest representable value."""
        if self.is_float:
            return (-math.inf, math.inf)
        bits = 8 * self.width
        if self.is_signed:
            return (-(1 << (bits - 1)), (1 << (bits - 1)) - 1)
        return (0, (1 << bits) - 1)

    def decode(self, raw) -> float:
        if len(raw) != self.width:
            raise MalformedRecordError(
                [], f"{self.name} needs {self.width} bytes, got {len(raw)}"
            )

        (value,) = self._struct.unpack(raw)
        if self.is_float and not math.isfinite(value):
            raise MalformedRecordError([], f"{self.name} decoded to {value}")
        return float(value)

    def encode(self, value) -> bytes:
        if not self.is_float:
            value = int(value)
        return self._struct.pack(value)

    def to_str(self) -> str:
        return self.name


def _encodings() -> Dict[str, RecordEncoding]:
    kinds = {
        "i16": "h",
        "u16": "H",
        "i32": "i",
        "u32": "I",
        "i64": "q",
        "f32": "f",
        "f64": "d",
    }
    table = {}
    for kind, code in kinds.items():
        for suffix, order in (("le", "<"), ("be", ">")):
            name = f"{kind}_{suffix}"
            table[name] = RecordEncoding(name, order + code)
    return table


ENCODINGS: Dict[str, RecordEncoding] = _encodings()

I32_BE = ENCODINGS["i32_be"]
I32_LE = ENCODINGS["i32_le"]
F32_LE = ENCODINGS["f32_le"]
F64_LE = ENCODINGS["f64_le"]


def parse_encoding(value) -> RecordEncoding:
    """
    Converts a name or an encoding into a RecordEncoding.
    Accepts: I32_BE, "i32_be", "F32_LE", etc.
    """
    if isinstance(value, RecordEncoding):
        return value

    if isinstance(value, str):
        try:
            return ENCODINGS[value.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unknown record encoding: '{value}'. Known: {sorted(ENCODINGS)}"
            )

    raise TypeError(f"Cannot parse record encoding from value: {value!r}")
