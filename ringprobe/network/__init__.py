"""
Network probes for ring.
"""

from .ping import icmp_probe, ICMPPacket, ICMPSession
from .tcp import tcp_probe, tcp_connect
from .utils import is_ip_literal, resolve_ping_address, resolve_socket_address

__all__ = [
    "icmp_probe",
    "ICMPPacket",
    "ICMPSession",
    "tcp_probe",
    "tcp_connect",
    "is_ip_literal",
    "resolve_ping_address",
    "resolve_socket_address",
]
