from abc import ABC, abstractmethod


class WriterPort(ABC):
    @abstractmethod
    def write(self, data: bytes) -> int:
        """Write raw record bytes, returns the number of bytes written."""
        pass

    def close(self):
        """ Close writer. """
        pass
