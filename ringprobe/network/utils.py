"""
Core address resolution helpers.
"""
import socket
from typing import Optional, Tuple, Any

SocketAddress = Tuple[Any, ...]


def is_ip_literal(host: str) -> Tuple[bool, Optional[int]]:
    """Checks if a string is a valid IP literal."""
    try:
        socket.inet_pton(socket.AF_INET, host)
        return True, socket.AF_INET
    except OSError:
        pass
    try:
        socket.inet_pton(socket.AF_INET6, host.split('%')[0])
        return True, socket.AF_INET6
    except OSError:
        return False, None


def resolve_socket_address(host: str, port: int) -> Optional[Tuple[int, SocketAddress]]:
    """
    Resolves host:port to the first usable (family, sockaddr) pair.

    Returns None if the lookup fails or yields nothing.
    """
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (OSError, UnicodeError):
        return None
    for family, _socktype, _proto, _canonname, sockaddr in infos:
        if family in (socket.AF_INET, socket.AF_INET6):
            return family, sockaddr
    return None


def resolve_ping_address(host: str) -> Optional[Tuple[int, str]]:
    """
    Resolves a bare host to a (family, ip) pair for ICMP.

    IP literals are used as-is. Hostnames take the first address returned
    by the resolver. Returns None if the resolver produced no address;
    resolver errors propagate as socket.gaierror.
    """
    is_ip, family = is_ip_literal(host)
    if is_ip and family is not None:
        return family, host

    infos = socket.getaddrinfo(host, None)
    for family, _socktype, _proto, _canonname, sockaddr in infos:
        if family in (socket.AF_INET, socket.AF_INET6):
            return family, str(sockaddr[0])
    return None
