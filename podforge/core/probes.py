"""Ways of asking whether something is listening on a TCP address."""

import logging
import socket
from typing import Callable, Tuple

logger = logging.getLogger(__name__)

SocketAddr = Tuple[str, int]
Probe = Callable[[SocketAddr], bool]

CONNECT_TIMEOUT = 0.5  # seconds


def bind_probe(addr: SocketAddr) -> bool:
    """Try to bind a local socket to `addr`.

    A successful bind means the address is reachable from this host and
    counts as listening; a failed bind counts as not listening yet.  This
    relies on the host sharing a network namespace with the container
    bridge, so it is a heuristic rather than a real health check.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind(addr)
        except OSError as e:
            logger.debug(f"{addr[0]}:{addr[1]} is CLOSED ({e})")
            return False
    return True


def connect_probe(addr: SocketAddr, timeout: float = CONNECT_TIMEOUT) -> bool:
    """Complete a TCP handshake with `addr`."""
    try:
        with socket.create_connection(addr, timeout=timeout):
            return True
    except OSError as e:
        logger.debug(f"{addr[0]}:{addr[1]} refused connection ({e})")
        return False
