"""
Expands port specifications and host lists into concrete probe targets.
"""
from __future__ import annotations
import re
from typing import Iterable, List, Optional, Tuple

from .models import ProbeKind, ProbeTarget

MAX_PORT = 65535

_NUMBER = re.compile(r"\d+", re.ASCII)


def _parse_port(token: str) -> Optional[int]:
    """Parses one port number, returning None if it is not a 16-bit unsigned integer."""
    token = token.strip()
    if not _NUMBER.fullmatch(token):
        return None
    value = int(token)
    if value > MAX_PORT:
        return None
    return value


def _parse_token(token: str) -> List[int]:
    """Turns a single comma-separated token into its ports; malformed tokens yield nothing."""
    if '-' in token:
        bounds = token.split('-')
        if len(bounds) != 2:
            return []
        start, end = _parse_port(bounds[0]), _parse_port(bounds[1])
        if start is None or end is None:
            return []
        # A reversed range is empty rather than an error
        return list(range(start, end + 1))
    port = _parse_port(token)
    return [] if port is None else [port]


def parse_ports(spec: str) -> List[int]:
    """
    Parses a port specification such as "80,443,1000-1002".

    Tokens are processed left to right and ranges expand in ascending order.
    Tokens that do not parse contribute no ports and never stop the tokens
    after them from being processed.
    """
    ports: List[int] = []
    for token in spec.split(','):
        ports.extend(_parse_token(token))
    return ports


def format_ports(ports: Iterable[int]) -> str:
    """Serializes a port list back into a specification string."""
    return ','.join(str(p) for p in ports)


def expand_tcp_targets(hosts: List[str], ports: List[int]) -> List[ProbeTarget]:
    """Builds the host x port matrix, hosts in the outer loop and ports in the inner."""
    return [ProbeTarget(host, port, ProbeKind.TCP) for host in hosts for port in ports]


def expand_icmp_targets(hosts: List[str]) -> List[ProbeTarget]:
    """One ICMP target per host, in input order."""
    return [ProbeTarget(host, None, ProbeKind.ICMP) for host in hosts]


def build_targets(hosts: List[str], ports: List[int], ping: bool) -> Tuple[List[ProbeTarget], List[ProbeTarget]]:
    """Returns the (tcp, icmp) target lists for one cycle."""
    tcp_targets = expand_tcp_targets(hosts, ports) if ports else []
    icmp_targets = expand_icmp_targets(hosts) if ping else []
    return tcp_targets, icmp_targets
