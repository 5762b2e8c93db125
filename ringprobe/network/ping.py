"""
Handles ICMP echo probing over raw sockets.
"""
import logging
import random
import select
import socket
import struct
import time
from dataclasses import dataclass
from typing import List, Optional

from ..aggregation import aggregate, down_result
from ..models import AttemptOutcome, ProbeKind, ProbeTarget, TargetResult
from .utils import resolve_ping_address

ICMP_ECHO_REQUEST = 8
ICMP_ECHO_REPLY = 0
ICMPV6_ECHO_REQUEST = 128
ICMPV6_ECHO_REPLY = 129

_HEADER = struct.Struct('!BBHHH')


@dataclass
class ICMPPacket:
    type: int
    code: int
    checksum: int
    identifier: int
    sequence: int
    payload: bytes = b''

    def pack(self) -> bytes:
        header = _HEADER.pack(self.type, self.code, 0, self.identifier, self.sequence)
        checksum = self._calculate_checksum(header + self.payload)
        header = _HEADER.pack(self.type, self.code, checksum, self.identifier, self.sequence)
        return header + self.payload

    @classmethod
    def parse(cls, data: bytes, family: int) -> Optional['ICMPPacket']:
        """Decodes a received datagram; IPv4 raw sockets prepend the IP header."""
        if family == socket.AF_INET:
            if not data:
                return None
            data = data[(data[0] & 0x0f) * 4:]
        if len(data) < _HEADER.size:
            return None
        type_, code, checksum, identifier, sequence = _HEADER.unpack_from(data)
        return cls(type_, code, checksum, identifier, sequence, data[_HEADER.size:])

    @staticmethod
    def _calculate_checksum(data: bytes) -> int:
        if len(data) % 2:
            data += b'\x00'
        res = sum(struct.unpack('!%dH' % (len(data) // 2), data))
        res = (res >> 16) + (res & 0xffff)
        res += res >> 16
        return ~res & 0xffff


class ICMPSession:
    """
    A raw ICMP socket bound to one address family, owned by a single probe.

    Opening the socket needs elevated privilege on most systems, so the
    constructor raises OSError when it is not available.
    """

    def __init__(self, family: int, identifier: int, timeout: float = 1.0):
        self.family = family
        self.identifier = identifier
        self.timeout = timeout
        proto = socket.IPPROTO_ICMPV6 if family == socket.AF_INET6 else socket.IPPROTO_ICMP
        self.sock = socket.socket(family, socket.SOCK_RAW, proto)

    def close(self):
        self.sock.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _is_reply(self, packet: Optional[ICMPPacket], sequence: int) -> bool:
        if packet is None:
            return False
        reply_type = ICMPV6_ECHO_REPLY if self.family == socket.AF_INET6 else ICMP_ECHO_REPLY
        return (
            packet.type == reply_type
            and packet.identifier == self.identifier
            and packet.sequence == sequence
        )

    def ping(self, address: str, sequence: int) -> AttemptOutcome:
        """Sends one echo request and waits for the matching reply."""
        request_type = ICMPV6_ECHO_REQUEST if self.family == socket.AF_INET6 else ICMP_ECHO_REQUEST
        packet = ICMPPacket(
            type=request_type,
            code=0,
            checksum=0,
            identifier=self.identifier,
            sequence=sequence,
            payload=struct.pack('!d', time.time()),
        )
        expected_source = address.split('%')[0]

        start = time.perf_counter()
        deadline = start + self.timeout
        try:
            self.sock.sendto(packet.pack(), (address, 0))
            while True:
                remaining = deadline - time.perf_counter()
                if remaining <= 0:
                    break
                ready, _, _ = select.select([self.sock], [], [], remaining)
                if not ready:
                    break
                data, addr = self.sock.recvfrom(2048)
                if addr[0].split('%')[0] != expected_source:
                    continue
                if self._is_reply(ICMPPacket.parse(data, self.family), sequence):
                    elapsed_ms = (time.perf_counter() - start) * 1000
                    return AttemptOutcome(True, elapsed_ms=round(elapsed_ms, 3))
        except OSError as e:
            return AttemptOutcome(False, error=f"ping_error: {e}")
        return AttemptOutcome(False, error=f"ping_error: request timeout for icmp_seq {sequence}")


def icmp_probe(host: str, count: int, timeout_ms: int) -> TargetResult:
    """
    Pings `host` `count` times using one raw session for the whole probe.

    Resolution or session failures short-circuit the probe without sending
    any echo request.
    """
    target = ProbeTarget(host, None, ProbeKind.ICMP)
    try:
        resolved = resolve_ping_address(host)
    except (OSError, UnicodeError) as e:
        logging.debug(f"DNS lookup for {host} failed: {e}")
        return down_result(target, count, f"dns_error: {e}")
    if resolved is None:
        return down_result(target, count, "dns_resolution_failed")

    family, address = resolved
    identifier = random.randint(0, 0xffff)
    try:
        session = ICMPSession(family, identifier, timeout=timeout_ms / 1000.0)
    except OSError as e:
        logging.debug(f"Could not open ICMP socket for {host}: {e}")
        return down_result(target, count, f"icmp_client_error: {e} (requires elevated privilege, try running as root/admin)")

    outcomes: List[AttemptOutcome] = []
    with session:
        for sequence in range(1, count + 1):
            outcome = session.ping(address, sequence & 0xffff)
            logging.debug(f"icmp {host} ({address}) seq {sequence}/{count}: {outcome}")
            outcomes.append(outcome)

    return aggregate(target, count, outcomes)
