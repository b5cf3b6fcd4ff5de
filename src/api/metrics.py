"""Metrics service for tracking recommendation performance.

Singleton service to track call counts and latency per recommendation
operation.
"""

import threading
from typing import Dict


class _OperationStats:
    """Counters for one operation."""

    def __init__(self):
        self.count = 0
        self.errors = 0
        self.total_latency_ms = 0.0
        self.min_latency_ms = float("inf")
        self.max_latency_ms = 0.0

    def snapshot(self) -> Dict:
        avg_latency = self.total_latency_ms / self.count if self.count > 0 else 0.0
        return {
            "count": self.count,
            "errors": self.errors,
            "average_latency_ms": round(avg_latency, 2),
            "min_latency_ms": round(self.min_latency_ms, 2) if self.count > 0 else 0.0,
            "max_latency_ms": round(self.max_latency_ms, 2),
        }


class MetricsService:
    """Singleton service for tracking API metrics.

    Thread-safe counters and latency tracking, keyed by operation name.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(MetricsService, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._stats_lock = threading.Lock()
        self._operations: Dict[str, _OperationStats] = {}
        self._initialized = True

    def record(self, operation: str, latency_ms: float, error: bool = False) -> None:
        """Record one call of an operation.

        Args:
            operation: Operation name, e.g. "recommendations"
            latency_ms: Latency in milliseconds
            error: Whether the call failed
        """
        with self._stats_lock:
            stats = self._operations.setdefault(operation, _OperationStats())
            stats.count += 1
            if error:
                stats.errors += 1
            stats.total_latency_ms += latency_ms
            stats.min_latency_ms = min(stats.min_latency_ms, latency_ms)
            stats.max_latency_ms = max(stats.max_latency_ms, latency_ms)

    def get_metrics(self) -> Dict:
        """Get current metrics for every recorded operation."""
        with self._stats_lock:
            return {name: stats.snapshot() for name, stats in self._operations.items()}

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._stats_lock:
            self._operations.clear()


# Global singleton instance
metrics_service = MetricsService()
