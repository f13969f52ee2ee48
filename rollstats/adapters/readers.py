import socket
import os
import serial

from rollstats.core.domain.params.source_params import SourceParams
from rollstats.core.ports.reader import ReaderPort


class FileReader(ReaderPort):
    def __init__(self, filename: str, mode: str = "rb"):
        """
        File reader adapter.
            :param filename: Path to the file
            :param mode: File mode, default is read-binary
        """
        if not os.path.exists(filename):
            raise FileNotFoundError(f"File {filename} does not exist")
        self.file = open(filename, mode)

    def read(self, size: int = -1) -> bytes:
        """
        Read up to `size` bytes from the file. If size=-1, read entire file.
        """
        return self.file.read(size)

    def close(self):
        self.file.close()


class UDPSocketReader(ReaderPort):
    def __init__(self, host: str, port: int, timeout: float = 1.0):
        """
        UDP socket reader adapter.
            :param host: Local interface to bind (e.g. 0.0.0.0)
            :param port: Local port to listen on
            :param timeout: Seconds to wait for a datagram before returning b""
        """
        self.addr = (host, port)
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.settimeout(timeout)
        self.sock.bind(self.addr)

    def read(self, size: int) -> bytes:
        """
        Read one UDP packet from the socket.
        """
        try:
            data, _ = self.sock.recvfrom(size)
        except socket.timeout:
            return b""
        return data

    def close(self):
        self.sock.close()


class SerialReader(ReaderPort):
    def __init__(self, port_name: str, baud_rate: int, timeout: float = 1.0):
        """
        Serial port reader adapter.
            :param port_name: Device, e.g. /dev/ttyACM0
            :param baud_rate: Line rate
            :param timeout: Seconds a read may block
        """
        self.ser = serial.Serial(port_name, baud_rate, timeout=timeout)

    def read(self, size: int) -> bytes:
        # return whatever is buffered, block for at least one byte
        waiting = self.ser.in_waiting
        return self.ser.read(min(size, waiting) if waiting else 1)

    def close(self):
        self.ser.close()


def build_reader(params: SourceParams) -> ReaderPort:
    if not params.enable:
        raise ValueError("Source is not configured. Missing 'filename', 'ip' or 'serial'")

    if params.ip and params.port:
        return UDPSocketReader(params.ip, params.port)
    if params.serial_port:
        return SerialReader(params.serial_port, params.baud_rate)
    return FileReader(params.filename)
