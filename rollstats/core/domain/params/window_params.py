from dataclasses import dataclass
from typing import Optional

from rollstats.core.domain.encoding import RecordEncoding, F32_LE, parse_encoding
from rollstats.core.services.reconstructor import ReconstructorStrategy
from rollstats.core.services.window import validate_capacity

DEFAULT_CAPACITY = 1000
DEFAULT_ENCODING = F32_LE
DEFAULT_STRATEGY = ReconstructorStrategy.SLICE


@dataclass
class WindowParams:
    capacity: int = DEFAULT_CAPACITY
    encoding: RecordEncoding = DEFAULT_ENCODING
    strategy: ReconstructorStrategy = DEFAULT_STRATEGY
    recompute_every: Optional[int] = None

    @staticmethod
    def from_dict(window_props: dict) -> "WindowParams":
        capacity = validate_capacity(window_props.get("capacity", DEFAULT_CAPACITY))
        encoding = parse_encoding(window_props.get("encoding", DEFAULT_ENCODING.name))
        strategy = ReconstructorStrategy.parse(
            window_props.get("strategy", DEFAULT_STRATEGY.value)
        )

        recompute_every = window_props.get("recompute_every")
        if recompute_every is not None:
            if not isinstance(recompute_every, int) or recompute_every <= 0:
                raise ValueError(
                    f"recompute_every must be a positive integer, got {recompute_every!r}"
                )

        return WindowParams(
            capacity=capacity,
            encoding=encoding,
            strategy=strategy,
            recompute_every=recompute_every,
        )
