from abc import ABC, abstractmethod


class ReaderPort(ABC):
    @abstractmethod
    def read(self, size: int) -> bytes:
        """
        Read up to `size` raw bytes. Chunks need not be aligned to record
        boundaries. b"" means no data right now (or end of file).
        """
        pass

    @abstractmethod
    def close(self):
        """close reader."""
        pass
