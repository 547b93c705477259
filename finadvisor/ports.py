# finadvisor/ports.py
import socket
from typing import Optional


class PortUnavailableError(RuntimeError):
    pass


def is_port_available(port: int, host: str = "0.0.0.0") -> bool:
    """True if a TCP listener could bind ``host:port`` right now."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_available_port(start_port: int, max_port: Optional[int] = None, host: str = "0.0.0.0") -> int:
    """Return the first free port in ``start_port..max_port`` (inclusive, default start + 10)."""
    if max_port is None:
        max_port = start_port + 10
    for port in range(start_port, max_port + 1):
        if is_port_available(port, host):
            return port
    raise PortUnavailableError(f"No available ports found between {start_port} and {max_port}")
