from typing import Iterable, List, Optional
import numpy as np

from rollstats.core.domain.encoding import RecordEncoding


def synthetic_values(
    encoding: RecordEncoding,
    count: int,
    mean: float = 0.0,
    std: float = 1.0,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Normal samples that survive an encode/decode through `encoding`."""
    rng = np.random.default_rng(seed)
    values = rng.normal(mean, std, size=count)
    if encoding.is_float:
        if encoding.width == 4:
            values = values.astype(np.float32).astype(float)
        return values

    lo, hi = encoding.value_range()
    return np.clip(np.rint(values), lo, hi)


def synthetic_records(
    encoding: RecordEncoding,
    count: int,
    mean: float = 0.0,
    std: float = 1.0,
    seed: Optional[int] = None,
) -> bytes:
    """`count` normally distributed records encoded back to back."""
    values = synthetic_values(encoding, count, mean, std, seed)
    return encode_values(encoding, values)


def encode_values(encoding: RecordEncoding, values: Iterable[float]) -> bytes:
    return b"".join(encoding.encode(v) for v in values)


def split_chunks(data: bytes, sizes: Iterable[int]) -> List[bytes]:
    """
    Cut `data` into consecutive chunks of the given sizes. Whatever is left
    after the last size becomes a final chunk.
    """
    chunks = []
    start = 0
    for size in sizes:
        if size < 0:
            raise ValueError(f"chunk size must be non-negative, got {size}")
        chunks.append(data[start : start + size])
        start += size
    if start < len(data):
        chunks.append(data[start:])
    return chunks
