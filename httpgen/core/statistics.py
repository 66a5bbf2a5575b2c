"""
Thread-safe run statistics.

Every execution reports into one Statistics instance. All mutations and
reads go through a single lock so that request_count + failure_count is
always observed consistently, even mid-run.
"""

from dataclasses import dataclass
from threading import Lock


@dataclass(frozen=True)
class StatisticsSnapshot:
    """Consistent point-in-time copy of the counters."""
    request_count: int = 0
    failure_count: int = 0
    total_duration: float = 0.0
    average_duration: float = 0.0

    @property
    def resolved(self) -> int:
        """Number of executions that have resolved so far."""
        return self.request_count + self.failure_count


class Statistics:
    """
    Aggregated counters for a run.

    request_count and failure_count are disjoint; total_duration only
    accumulates the durations of successful records.
    """

    def __init__(self):
        self._lock = Lock()
        self._total_duration = 0.0
        self._request_count = 0
        self._failure_count = 0

    def add_duration(self, duration: float) -> None:
        with self._lock:
            self._total_duration += duration

    def increment_requests(self) -> None:
        with self._lock:
            self._request_count += 1

    def increment_failures(self) -> None:
        with self._lock:
            self._failure_count += 1

    def record_success(self, duration: float) -> None:
        """Count one successful record and its duration in one step."""
        with self._lock:
            self._request_count += 1
            self._total_duration += duration

    def record_failure(self) -> None:
        self.increment_failures()

    def average_duration(self) -> float:
        """Mean duration of successful records, 0.0 when there are none."""
        with self._lock:
            return self._average_locked()

    def _average_locked(self) -> float:
        if self._request_count == 0:
            return 0.0
        return self._total_duration / self._request_count

    def snapshot(self) -> StatisticsSnapshot:
        with self._lock:
            return StatisticsSnapshot(
                request_count=self._request_count,
                failure_count=self._failure_count,
                total_duration=self._total_duration,
                average_duration=self._average_locked(),
            )

    @property
    def request_count(self) -> int:
        with self._lock:
            return self._request_count

    @property
    def failure_count(self) -> int:
        with self._lock:
            return self._failure_count

    @property
    def total_duration(self) -> float:
        with self._lock:
            return self._total_duration
