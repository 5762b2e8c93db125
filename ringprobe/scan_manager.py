"""
Runs scan cycles: fans out one probe task per target and collects the results.
"""
from __future__ import annotations
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, Future
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from .aggregation import down_result
from .models import ProbeKind, ProbeTarget, ScanResult, TargetResult
from .network import icmp_probe, tcp_probe
from .parsing import build_targets

TcpProbe = Callable[[str, int, int, int], TargetResult]
IcmpProbe = Callable[[str, int, int], TargetResult]
ResultSink = Callable[[ScanResult], None]


class ScanState(Enum):
    """Represents the lifecycle of the scan loop."""
    RUNNING = auto()
    TERMINATED = auto()


class ScanManager:
    """Builds, runs and emits scan cycles over a fixed set of hosts and ports."""

    def __init__(
        self,
        hosts: List[str],
        ports: List[int],
        app_config: Dict[str, Any],
        on_result: ResultSink,
        on_cycle_wait: Optional[Callable[[float], None]] = None,
        tcp_probe_fn: TcpProbe = tcp_probe,
        icmp_probe_fn: IcmpProbe = icmp_probe,
    ):
        self.hosts = list(hosts)
        self.ports = list(ports)
        self.config = app_config
        self.on_result = on_result
        self.on_cycle_wait = on_cycle_wait
        self.tcp_probe_fn = tcp_probe_fn
        self.icmp_probe_fn = icmp_probe_fn

        self.state = ScanState.RUNNING
        self.stop_event = threading.Event()
        self.cycles = 0

    def _probe(self, target: ProbeTarget) -> TargetResult:
        count = int(self.config['count'])
        if target.test_type == ProbeKind.TCP:
            return self.tcp_probe_fn(target.host, target.port, count, int(self.config['timeout_ms']))
        return self.icmp_probe_fn(target.host, count, int(self.config['ping_timeout_ms']))

    def _collect(self, target: ProbeTarget, future: Future) -> TargetResult:
        try:
            return future.result()
        except Exception as e:
            logging.error(f"Probe for {target} failed with exception: {e}")
            return down_result(target, int(self.config['count']), f"probe_error: {e}")

    def run_cycle(self) -> ScanResult:
        """Probes every target once and returns the cycle's ScanResult in target order."""
        tcp_targets, icmp_targets = build_targets(self.hosts, self.ports, bool(self.config['ping']))
        targets = tcp_targets + icmp_targets
        logging.info(f"Starting scan cycle {self.cycles + 1} over {len(targets)} target(s)")

        results: List[TargetResult] = []
        if targets:
            workers = min(len(targets), int(self.config['max_workers']))
            executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ring-probe")
            try:
                futures = [(target, executor.submit(self._probe, target)) for target in targets]
                # Join in submission order, not completion order
                results = [self._collect(target, future) for target, future in futures]
            except BaseException:
                # Ctrl-C must not wait for every queued probe to run
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            executor.shutdown(wait=True)

        self.cycles += 1
        logging.debug(f"Scan cycle {self.cycles} finished")
        return ScanResult(scan_timestamp=str(int(time.time())), results=results)

    def run(self):
        """
        Runs cycles until single-shot mode finishes or stop() is called.

        Each cycle's result goes to on_result before the inter-cycle wait.
        """
        self.state = ScanState.RUNNING
        while True:
            self.on_result(self.run_cycle())

            if self.config['once'] or self.stop_event.is_set():
                break

            interval = float(self.config['scan_interval_seconds'])
            if self.on_cycle_wait:
                self.on_cycle_wait(interval)
            if self.stop_event.wait(timeout=interval):
                break
        self.state = ScanState.TERMINATED

    def stop(self):
        """Ends the loop after the current cycle's emission."""
        self.stop_event.set()
