from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional, Dict, Any

STATUS_UP = "up"
STATUS_DOWN = "down"
STATUS_PARTIAL = "partial"


class ProbeKind(str, Enum):
    """Kind of probe run against a target."""
    TCP = "tcp"
    ICMP = "icmp"


@dataclass(frozen=True)
class ProbeTarget:
    """A single (host, optional port, test kind) triple probed within one cycle."""
    host: str
    port: Optional[int]
    test_type: ProbeKind


@dataclass
class AttemptOutcome:
    """Result of one connect/ping try."""
    success: bool
    elapsed_ms: Optional[float] = None
    error: Optional[str] = None


@dataclass
class TargetResult:
    """Aggregate of all attempts against one target."""
    host: str
    port: Optional[int]
    test_type: str
    attempts: int
    successful: int
    success_rate: float
    avg_response_time_ms: Optional[float]
    response_times: List[float] = field(default_factory=list)
    status: str = STATUS_DOWN
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScanResult:
    """Everything produced by one cycle."""
    scan_timestamp: str
    results: List[TargetResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scan_timestamp': self.scan_timestamp,
            'results': [r.to_dict() for r in self.results],
        }
