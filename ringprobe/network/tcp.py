"""
Timed TCP connect probing.
"""
import logging
import socket
import time
from typing import List

from ..aggregation import aggregate, down_result
from ..models import AttemptOutcome, ProbeKind, ProbeTarget, TargetResult
from .utils import SocketAddress, resolve_socket_address


def tcp_connect(family: int, sockaddr: SocketAddress, timeout_ms: int) -> AttemptOutcome:
    """Opens and immediately closes one TCP connection, bounded by timeout_ms."""
    start = time.perf_counter()
    try:
        with socket.socket(family, socket.SOCK_STREAM) as sock:
            sock.settimeout(timeout_ms / 1000.0)
            sock.connect(sockaddr)
            elapsed_ms = (time.perf_counter() - start) * 1000
        return AttemptOutcome(True, elapsed_ms=round(elapsed_ms, 3))
    except socket.timeout:
        return AttemptOutcome(False, error="timeout")
    except OSError as e:
        return AttemptOutcome(False, error=f"connection_error: {e}")


def tcp_probe(host: str, port: int, count: int, timeout_ms: int) -> TargetResult:
    """
    Runs `count` sequential connect attempts against host:port.

    The address is resolved once up front; if that fails no attempts are made.
    """
    target = ProbeTarget(host, port, ProbeKind.TCP)
    resolved = resolve_socket_address(host, port)
    if resolved is None:
        logging.debug(f"Could not resolve {host}:{port}")
        return down_result(target, count, "dns_resolution_failed")

    family, sockaddr = resolved
    outcomes: List[AttemptOutcome] = []
    for attempt in range(1, count + 1):
        outcome = tcp_connect(family, sockaddr, timeout_ms)
        logging.debug(f"tcp {host}:{port} attempt {attempt}/{count}: {outcome}")
        outcomes.append(outcome)

    return aggregate(target, count, outcomes)
