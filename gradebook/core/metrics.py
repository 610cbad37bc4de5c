from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Dict, Iterator, TypeVar, cast

_F = TypeVar("_F", bound=Callable[..., Any])


@dataclass(slots=True)
class TimingStats:
    """Running aggregates for one timing label."""

    count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0
    last_ms: float = 0.0
    last_at: str | None = None

    def update(self, elapsed_ms: float) -> None:
        value = float(elapsed_ms)
        self.count += 1
        self.total_ms += value
        self.max_ms = max(self.max_ms, value)
        self.last_ms = value
        self.last_at = datetime.now(timezone.utc).isoformat()

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    def snapshot(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "total_ms": self.total_ms,
            "max_ms": self.max_ms,
            "avg_ms": self.avg_ms,
            "last_ms": self.last_ms,
            "last_at": self.last_at,
        }


class _MetricsRegistry:
    """Thread-safe in-process store of timings and counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timings: Dict[str, TimingStats] = {}
        self._counters: Dict[str, int] = {}

    def record(self, label: str, elapsed_ms: float) -> None:
        if not label:
            return
        with self._lock:
            self._timings.setdefault(label, TimingStats()).update(elapsed_ms)

    def inc(self, label: str, amount: int = 1) -> None:
        if not label:
            return
        with self._lock:
            self._counters[label] = self._counters.get(label, 0) + int(amount)

    def timings_snapshot(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {label: stats.snapshot() for label, stats in self._timings.items()}

    def counters_snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def reset(self) -> None:
        with self._lock:
            self._timings.clear()
            self._counters.clear()


metrics_registry = _MetricsRegistry()


@contextmanager
def timer(label: str) -> Iterator[None]:
    """Time a block and record it under ``label``, even when it raises."""
    t0 = perf_counter()
    try:
        yield
    finally:
        metrics_registry.record(label, (perf_counter() - t0) * 1000.0)


def count_calls(label: str) -> Callable[[_F], _F]:
    """Decorator that increments a counter each time the function is invoked."""

    def _wrap(func: _F) -> _F:
        @wraps(func)
        def _inner(*args: Any, **kwargs: Any):
            metrics_registry.inc(label)
            return func(*args, **kwargs)

        return cast(_F, _inner)

    return _wrap


def inc_counter(label: str, amount: int = 1) -> None:
    metrics_registry.inc(label, amount)


def get_counters() -> Dict[str, int]:
    return metrics_registry.counters_snapshot()


def get_metrics() -> Dict[str, Dict[str, Any]]:
    return metrics_registry.timings_snapshot()


__all__ = [
    "timer",
    "count_calls",
    "inc_counter",
    "get_counters",
    "get_metrics",
    "metrics_registry",
]
