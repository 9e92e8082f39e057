"""
In-memory metrics collector for sanitizer calls.
Thread-safe singleton – no input values are ever stored.
"""
import threading
import time
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class LatencyStats:
    """Aggregated latency statistics (sum/count for average calculation)."""
    sum_ms: float = 0.0
    count: int = 0

    def record(self, ms: float) -> None:
        self.sum_ms += ms
        self.count += 1

    @property
    def avg_ms(self) -> float:
        return self.sum_ms / self.count if self.count > 0 else 0.0


@dataclass
class MetricsData:
    """Container for all aggregated metrics."""
    total_calls: int = 0
    success_count: int = 0
    error_count: int = 0
    error_codes: Dict[str, int] = field(default_factory=dict)
    records_processed: int = 0
    null_fields: int = 0
    latency: LatencyStats = field(default_factory=LatencyStats)
    started_at: float = field(default_factory=time.time)


class MetricsCollector:
    """
    Thread-safe singleton for collecting sanitizer metrics.

    Usage:
        metrics = get_metrics_collector()
        metrics.record_call(latency_ms=0.4, success=True, records_count=3)
    """
    _instance: "MetricsCollector | None" = None
    _lock = threading.Lock()

    def __new__(cls) -> "MetricsCollector":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._data = MetricsData()
                    instance._data_lock = threading.Lock()
                    cls._instance = instance
        return cls._instance

    def record_call(
        self,
        latency_ms: float,
        success: bool,
        records_count: int = 0,
        null_fields: int = 0,
        error_code: str | None = None,
    ) -> None:
        """
        Record a sanitize() completion.

        Args:
            latency_ms: Total call latency
            success: Whether the call returned a result
            records_count: Number of records sanitized (0 if failed before the engine ran)
            null_fields: Number of fields that coerced to null
            error_code: Error code if not success
        """
        with self._data_lock:
            self._data.total_calls += 1
            self._data.latency.record(latency_ms)
            self._data.records_processed += records_count
            self._data.null_fields += null_fields

            if success:
                self._data.success_count += 1
            else:
                self._data.error_count += 1
                if error_code:
                    self._data.error_codes[error_code] = (
                        self._data.error_codes.get(error_code, 0) + 1
                    )

    def get_snapshot(self) -> dict:
        """
        Get a snapshot of current metrics.
        Returns a plain dict suitable for JSON serialization.
        """
        with self._data_lock:
            uptime_seconds = int(time.time() - self._data.started_at)
            return {
                "uptime_seconds": uptime_seconds,
                "total_calls": self._data.total_calls,
                "success_count": self._data.success_count,
                "error_count": self._data.error_count,
                "error_codes": dict(self._data.error_codes),
                "records_processed": self._data.records_processed,
                "null_fields": self._data.null_fields,
                "latency": {
                    "sum_ms": round(self._data.latency.sum_ms, 3),
                    "count": self._data.latency.count,
                    "avg_ms": round(self._data.latency.avg_ms, 3),
                },
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._data_lock:
            self._data = MetricsData()


def get_metrics_collector() -> MetricsCollector:
    """Get the singleton metrics collector instance."""
    return MetricsCollector()
