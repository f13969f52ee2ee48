import socket
import os

from rollstats.core.ports.writer import WriterPort

MAX_DATAGRAM = 1472  # ethernet MTU minus IPv4 + UDP headers


class FileWriter(WriterPort):
    def __init__(self, filename: str, mode: str = "wb"):
        """
        File writer adapter.
            :param filename: Path to the record file
            :param mode: File mode, "wb" truncates, "ab" appends
        """
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self.filename = filename
        self.file = open(filename, mode)

    def write(self, data: bytes) -> int:
        written = self.file.write(data)
        self.file.flush()
        return written

    def close(self):
        self.file.close()


class UDPSocketWriter(WriterPort):
    def __init__(self, host: str, port: int, max_datagram: int = MAX_DATAGRAM):
        """
        UDP socket writer adapter. Payloads larger than `max_datagram` are
        sent as several datagrams; record boundaries are not preserved.
            :param host: Target hostname or IP
            :param port: Target port
        """
        if max_datagram <= 0:
            raise ValueError(f"max_datagram must be positive, got {max_datagram}")
        self.addr = (host, port)
        self.max_datagram = max_datagram
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    def write(self, data: bytes) -> int:
        view = memoryview(data)
        for start in range(0, len(view), self.max_datagram):
            self.sock.sendto(view[start : start + self.max_datagram], self.addr)
        return len(view)

    def close(self):
        self.sock.close()
