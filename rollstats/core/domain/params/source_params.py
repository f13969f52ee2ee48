from dataclasses import dataclass
from typing import Optional
import ipaddress
import re

DEFAULT_SOURCE_ENABLE = False
DEFAULT_CHUNK_SIZE = 4096
DEFAULT_BAUD_RATE = 115200


@dataclass
class SourceParams:
    enable: bool = DEFAULT_SOURCE_ENABLE
    filename: Optional[str] = None
    ip: Optional[str] = None
    port: Optional[int] = None
    serial_port: Optional[str] = None
    baud_rate: int = DEFAULT_BAUD_RATE
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @staticmethod
    def from_dict(source_props: dict) -> "SourceParams":
        ip = None
        port = None
        enable = True

        filename = source_props.get("filename")
        ip_port = source_props.get("ip")
        serial_props = source_props.get("serial") or {}

        if ip_port is not None:
            if not isinstance(ip_port, str):
                raise TypeError(f"ip_port must be a string, got {type(ip_port).__name__}")

            # Validate and split IP:port
            match = re.fullmatch(r"(\d{1,3}(?:\.\d{1,3}){3}):(\d{1,5})", ip_port)
            if not match:
                raise ValueError(f"ip_port '{ip_port}' is not in the format 'xxx.xxx.xxx.xxx:port'")
            ip_str, port_str = match.groups()

            try:
                ipaddress.IPv4Address(ip_str)
            except ipaddress.AddressValueError:
                raise ValueError(f"Invalid IPv4 address: {ip_str}")
            port_int = int(port_str)
            if not (0 < port_int < 65536):
                raise ValueError(f"Port must be 1-65535, got {port_int}")

            ip = ip_str
            port = port_int

        serial_port = serial_props.get("port_name")
        baud_rate = serial_props.get("baud_rate", DEFAULT_BAUD_RATE)

        chunk_size = source_props.get("chunk_size", DEFAULT_CHUNK_SIZE)
        if not isinstance(chunk_size, int) or chunk_size <= 0:
            raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")

        if (not filename or not isinstance(filename, str)) and ip_port is None and not serial_port:
            enable = False

        return SourceParams(
            enable=enable,
            filename=filename,
            ip=ip,
            port=port,
            serial_port=serial_port,
            baud_rate=baud_rate,
            chunk_size=chunk_size,
        )
