# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Metrics — In-memory counters and latency windows, exported through /health.

Counters in use:
  requests_total, status_<code>      request accounting (TraceMiddleware)
  backend_errors                     failed or erroring backend calls
  unhandled_errors                   exceptions that reached the catch-all
  tenants_created, tenant_rollbacks, tenant_orphans
"""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Any, Deque, Dict

WINDOW_SIZE = 1000


class Metrics:
    """Process-local metrics; values are lost on restart."""

    def __init__(self, window: int = WINDOW_SIZE):
        self._window = window
        self._counters: Dict[str, int] = defaultdict(int)
        self._windows: Dict[str, Deque[float]] = {}
        self._start_time = time.time()

    def inc(self, name: str, amount: int = 1) -> None:
        self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def observe(self, name: str, value: float) -> None:
        """Record an observation; only the most recent ``window`` are kept."""
        if name not in self._windows:
            self._windows[name] = deque(maxlen=self._window)
        self._windows[name].append(value)

    def reset(self) -> None:
        self._counters.clear()
        self._windows.clear()
        self._start_time = time.time()

    @staticmethod
    def _summarize(values: Deque[float]) -> Dict[str, float]:
        ordered = sorted(values)
        p95 = ordered[int(round(0.95 * (len(ordered) - 1)))]
        return {
            "count": len(ordered),
            "avg": round(sum(ordered) / len(ordered), 2),
            "p95": round(p95, 2),
            "max": round(ordered[-1], 2),
            "min": round(ordered[0], 2),
        }

    def snapshot(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "uptime_seconds": round(time.time() - self._start_time, 1),
            "counters": dict(self._counters),
        }
        for name, values in self._windows.items():
            if values:
                result[f"histogram_{name}"] = self._summarize(values)
        return result


# Global singleton
service_metrics = Metrics()
