"""
Reduces per-attempt outcomes into a single result per target.
"""
from __future__ import annotations
from typing import List, Optional, Sequence

from .models import (
    AttemptOutcome,
    ProbeTarget,
    TargetResult,
    STATUS_DOWN,
    STATUS_PARTIAL,
    STATUS_UP,
)


def classify_status(successful: int, attempts: int) -> str:
    if successful == attempts:
        return STATUS_UP
    if successful == 0:
        return STATUS_DOWN
    return STATUS_PARTIAL


def aggregate(target: ProbeTarget, attempts: int, outcomes: Sequence[AttemptOutcome]) -> TargetResult:
    """
    Builds the TargetResult for a target from its ordered attempt outcomes.

    The average covers only successful attempts, and the error is the latest
    failure's tag, kept only when no attempt succeeded.
    """
    response_times: List[float] = [o.elapsed_ms for o in outcomes if o.success and o.elapsed_ms is not None]
    successful = len(response_times)
    last_error: Optional[str] = None
    for outcome in outcomes:
        if not outcome.success:
            last_error = outcome.error

    avg = sum(response_times) / successful if successful else None

    return TargetResult(
        host=target.host,
        port=target.port,
        test_type=target.test_type.value,
        attempts=attempts,
        successful=successful,
        success_rate=successful / attempts,
        avg_response_time_ms=avg,
        response_times=response_times,
        status=classify_status(successful, attempts),
        error=last_error if successful == 0 else None,
    )


def down_result(target: ProbeTarget, attempts: int, error: str) -> TargetResult:
    """Result for a target whose probe was short-circuited before any attempt."""
    return aggregate(target, attempts, [AttemptOutcome(False, error=error)])
