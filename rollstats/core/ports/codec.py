from abc import ABC, abstractmethod


class CodecPort(ABC):
    """Turns one fixed-width raw record into a number."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Number of bytes of one record."""
        pass

    @abstractmethod
    def decode(self, raw) -> float:
        """Decode exactly `width` bytes. Raises MalformedRecordError."""
        pass
