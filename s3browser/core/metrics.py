"""Rolling request metrics kept in process memory."""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import threading
import time
from typing import Deque, Dict


@dataclass
class MetricPoint:
    status_code: int
    duration_ms: int

    @property
    def ok(self) -> bool:
        return self.status_code < 500


class MetricsCollector:
    """Per-route latency and error-rate window.

    One collector is created by the application factory and shared by the
    request middleware and the exception handlers.
    """

    def __init__(self, window_size: int = 200) -> None:
        self._window_size = window_size
        self._points: Dict[str, Deque[MetricPoint]] = {}
        self._last_alert: Dict[str, float] = {}
        self._lock = threading.Lock()

    def record(self, name: str, *, status_code: int, duration_ms: int) -> None:
        with self._lock:
            bucket = self._points.setdefault(name, deque(maxlen=self._window_size))
            bucket.append(MetricPoint(status_code=status_code, duration_ms=duration_ms))

    def snapshot(self) -> dict:
        with self._lock:
            items = [(name, list(points)) for name, points in self._points.items()]
        payload: dict[str, dict] = {}
        for name, points in items:
            if not points:
                continue
            total = len(points)
            errors = sum(1 for p in points if not p.ok)
            client_errors = sum(1 for p in points if 400 <= p.status_code < 500)
            durations = sorted(p.duration_ms for p in points)
            payload[name] = {
                "count": total,
                "errors": errors,
                "client_errors": client_errors,
                "error_rate": round(errors / total, 3),
                "avg_ms": int(sum(durations) / total),
                "p95_ms": durations[min(total - 1, int(total * 0.95))],
            }
        return payload

    def should_alert(
        self,
        name: str,
        *,
        error_rate: float = 0.2,
        avg_ms: int = 2000,
        min_interval_s: int = 60,
    ) -> bool:
        with self._lock:
            bucket = list(self._points.get(name) or ())
            if len(bucket) < 5:
                return False
            total = len(bucket)
            errors = sum(1 for p in bucket if not p.ok)
            avg = int(sum(p.duration_ms for p in bucket) / total)
            if (errors / total) < error_rate and avg < avg_ms:
                return False
            now = time.time()
            if now - self._last_alert.get(name, 0.0) < min_interval_s:
                return False
            self._last_alert[name] = now
            return True
