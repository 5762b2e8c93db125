# tests/test_tcp.py
import socket

import pytest

from ringprobe.network import tcp
from ringprobe.network.tcp import tcp_connect, tcp_probe


def test_tcp_probe_listening_target_is_up(listening_port):
    result = tcp_probe("127.0.0.1", listening_port, 3, 1000)
    assert result.test_type == "tcp"
    assert result.port == listening_port
    assert result.attempts == 3
    assert result.successful == 3
    assert result.status == "up"
    assert result.error is None
    assert len(result.response_times) == 3
    assert result.avg_response_time_ms == pytest.approx(sum(result.response_times) / 3)


def test_tcp_probe_nothing_listening_is_down(closed_port):
    result = tcp_probe("127.0.0.1", closed_port, 1, 50)
    assert result.test_type == "tcp"
    assert result.attempts == 1
    assert result.successful == 0
    assert result.status == "down"
    assert result.avg_response_time_ms is None
    assert result.error.startswith("connection_error:") or result.error == "timeout"


def test_tcp_probe_dns_failure_makes_no_attempts(monkeypatch):
    def fail_lookup(*args, **kwargs):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    def unexpected_connect(*args, **kwargs):
        raise AssertionError("no connection should be attempted")

    monkeypatch.setattr(socket, "getaddrinfo", fail_lookup)
    monkeypatch.setattr(tcp, "tcp_connect", unexpected_connect)

    result = tcp_probe("does-not-exist.invalid", 80, 4, 100)
    assert result.attempts == 4
    assert result.successful == 0
    assert result.status == "down"
    assert result.error == "dns_resolution_failed"
    assert result.response_times == []


class _TimingOutSocket:
    def __init__(self, *args, **kwargs):
        self.timeout = None

    def settimeout(self, value):
        self.timeout = value

    def connect(self, address):
        raise socket.timeout("timed out")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_tcp_connect_timeout_is_tagged(monkeypatch):
    monkeypatch.setattr(tcp.socket, "socket", _TimingOutSocket)
    outcome = tcp_connect(socket.AF_INET, ("192.0.2.1", 80), 10)
    assert not outcome.success
    assert outcome.error == "timeout"


def test_tcp_probe_mixed_outcomes_keep_order(monkeypatch):
    outcomes = iter([
        tcp.AttemptOutcome(False, error="timeout"),
        tcp.AttemptOutcome(True, elapsed_ms=4.0),
        tcp.AttemptOutcome(True, elapsed_ms=2.0),
    ])
    monkeypatch.setattr(tcp, "resolve_socket_address", lambda host, port: (socket.AF_INET, ("10.0.0.1", port)))
    monkeypatch.setattr(tcp, "tcp_connect", lambda family, sockaddr, timeout_ms: next(outcomes))

    result = tcp_probe("10.0.0.1", 22, 3, 100)
    assert result.status == "partial"
    assert result.response_times == [4.0, 2.0]
    assert result.avg_response_time_ms == pytest.approx(3.0)
    assert result.error is None
