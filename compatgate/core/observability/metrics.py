from __future__ import annotations

from collections import Counter
from typing import Dict, Optional

from prometheus_client import Counter as PromCounter

# Requests counters (HTTP-level)
_REQUESTS = Counter()

# Named counters (custom)
_NAMED = Counter()

EVALUATIONS_TOTAL = PromCounter(
    "compatgate_evaluations_total",
    "Target compatibility evaluations",
    ["verdict"],
)


def reset_metrics() -> None:
    """
    Test helper: clears the in-process counters.
    Prometheus counters are cumulative and are not reset.
    """
    _REQUESTS.clear()
    _NAMED.clear()


def inc_http(method: str, path: str, status: Optional[int] = None) -> None:
    m = (method or "UNKNOWN").upper()
    p = path or "/"
    s = status if status is not None else "unknown"

    _REQUESTS["requests_total"] += 1
    _REQUESTS[f"requests_{m}"] += 1
    _REQUESTS[f"path_{p}|{s}"] += 1


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def record_evaluation(compatible: bool) -> None:
    verdict = "compatible" if compatible else "incompatible"
    EVALUATIONS_TOTAL.labels(verdict=verdict).inc()
    inc_named(f"evaluations_{verdict}")


def snapshot_requests() -> Dict[str, int]:
    return dict(_REQUESTS)


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)
