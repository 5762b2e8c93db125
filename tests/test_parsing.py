# tests/test_parsing.py
import pytest

from ringprobe.models import ProbeKind
from ringprobe.parsing import (
    build_targets,
    expand_icmp_targets,
    expand_tcp_targets,
    format_ports,
    parse_ports,
)


def test_parse_ports_list_and_range():
    """Single ports and inclusive ranges expand left to right."""
    assert parse_ports("80,443,1000-1002") == [80, 443, 1000, 1001, 1002]


def test_parse_ports_drops_malformed_token():
    """A non-numeric token contributes nothing and does not affect its siblings."""
    assert parse_ports("abc,80") == [80]
    assert parse_ports("80,abc,22") == [80, 22]


@pytest.mark.parametrize("spec", ["5-3", "a-10", "10-", "-5", "1-2-3", "70000", "65530-70000", ""])
def test_parse_ports_malformed_tokens_yield_nothing(spec):
    """Reversed, half-open, oversized and empty tokens are dropped silently."""
    assert parse_ports(spec) == []


def test_parse_ports_keeps_order_and_duplicates():
    """Token order is kept exactly as written."""
    assert parse_ports("443,80,443") == [443, 80, 443]


def test_parse_ports_single_value_range():
    assert parse_ports("22-22") == [22]


def test_parse_ports_port_boundaries():
    assert parse_ports("0,65535") == [0, 65535]
    assert parse_ports("65536") == []


def test_parse_ports_tolerates_spaces_around_tokens():
    assert parse_ports("80, 443") == [80, 443]


@pytest.mark.parametrize("spec", ["80,443,1000-1002", "abc,80", "22,21,20-25", "9"])
def test_parse_ports_is_idempotent(spec):
    """Re-parsing the serialized port list gives the same ports in the same order."""
    ports = parse_ports(spec)
    assert parse_ports(format_ports(ports)) == ports


def test_expand_tcp_targets_host_major_order():
    """N hosts x M ports gives N*M targets, hosts outer and ports inner."""
    targets = expand_tcp_targets(["a", "b"], [1, 2, 3])
    assert len(targets) == 6
    assert [(t.host, t.port) for t in targets] == [
        ("a", 1), ("a", 2), ("a", 3),
        ("b", 1), ("b", 2), ("b", 3),
    ]
    assert all(t.test_type == ProbeKind.TCP for t in targets)


def test_expand_icmp_targets_one_per_host():
    targets = expand_icmp_targets(["b", "a"])
    assert [(t.host, t.port, t.test_type) for t in targets] == [
        ("b", None, ProbeKind.ICMP),
        ("a", None, ProbeKind.ICMP),
    ]


def test_build_targets_without_ports_or_ping():
    tcp, icmp = build_targets(["h"], [], ping=True)
    assert tcp == []
    assert len(icmp) == 1

    tcp, icmp = build_targets(["h"], [80], ping=False)
    assert len(tcp) == 1
    assert icmp == []
