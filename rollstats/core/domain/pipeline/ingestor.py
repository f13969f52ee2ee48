from typing import Optional
import logging
import threading

from rollstats.adapters.readers import FileReader
from rollstats.core.domain.errors import MalformedRecordError
from rollstats.core.domain.rolling_stats import RollingStats
from rollstats.core.domain.snapshot import Snapshot
from rollstats.core.ports.reader import ReaderPort

logger = logging.getLogger(__name__)


class Ingestor:
    """Pumps raw chunks from a reader into a RollingStats instance.

    RollingStats is single writer; every write and every snapshot goes
    through one lock so a reader thread and query callers can share it.

    Args:
        reader: Byte source.
        stats: Destination of the raw bytes.
        chunk_size: Maximum bytes requested per read.
    """

    def __init__(self, reader: ReaderPort, stats: RollingStats, chunk_size: int = 4096):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._reader = reader
        self.stats = stats
        self.chunk_size = chunk_size
        self.lock = threading.Lock()
        self.errors = 0
        self.bytes_read = 0
        self._running_ = False
        self._thread: Optional[threading.Thread] = None
        # an empty read from a file means end of data, other sources just idle
        self._stop_on_empty = isinstance(reader, FileReader)

    def step(self) -> int:
        """Read one chunk and feed it. Returns the number of bytes read."""
        data = self._reader.read(self.chunk_size)
        if not data:
            return 0

        with self.lock:
            try:
                self.stats.write(data)
            except MalformedRecordError as e:
                self.errors += len(e.offsets)
                logger.warning("Dropped %d malformed record(s): %s", len(e.offsets), e)
        self.bytes_read += len(data)
        return len(data)

    def drain(self) -> int:
        """Feed chunks until the reader returns no data. Returns bytes read."""
        total = 0
        while n := self.step():
            total += n
        return total

    def snapshot(self) -> Optional[Snapshot]:
        with self.lock:
            return self.stats.snapshot()

    @property
    def running(self) -> bool:
        return self._running_

    def start(self):
        self._running_ = True
        self._thread = threading.Thread(target=self._ingest, daemon=True)
        self._thread.start()
        logger.info("Ingestion started (chunk_size=%d)", self.chunk_size)

    def stop(self):
        self._running_ = False

    def join(self, timeout: Optional[float] = None):
        if self._thread:
            self._thread.join(timeout=timeout)

    def _ingest(self):
        try:
            while self._running_:
                if self.step() == 0 and self._stop_on_empty:
                    logger.info("End of input after %d bytes", self.bytes_read)
                    break
        except Exception:
            logger.exception("Ingestion failed")
            raise
        finally:
            self._running_ = False
            self._reader.close()
