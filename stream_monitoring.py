"""
Stream Monitoring
=================

Throughput and memory tracking for a single compaction run.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import psutil

from stream_errors import UpstreamReadError

logger = logging.getLogger(__name__)


@dataclass
class StreamMetrics:
    """Metrics for one pass over a stream"""
    start_time: float
    end_time: Optional[float] = None
    chunks_processed: int = 0
    bytes_in: int = 0
    bytes_out: int = 0
    read_errors: int = 0
    write_errors: int = 0
    memory_start: int = 0
    memory_peak: int = 0

    @property
    def duration(self) -> float:
        if self.end_time:
            return self.end_time - self.start_time
        return time.time() - self.start_time

    @property
    def reduction_percent(self) -> float:
        if self.bytes_in > 0:
            return (1 - self.bytes_out / self.bytes_in) * 100
        return 0.0

    @property
    def throughput_mb_per_sec(self) -> float:
        if self.duration > 0:
            return (self.bytes_in / 1024 / 1024) / self.duration
        return 0.0


class StreamMonitor:
    """Thread-safe counters for the stream pump"""

    def __init__(self, memory_sample_interval: int = 256):
        if memory_sample_interval <= 0:
            raise ValueError("memory_sample_interval must be positive")
        self.memory_sample_interval = memory_sample_interval
        self.metrics = StreamMetrics(start_time=time.time())
        self._lock = threading.Lock()
        try:
            self.process = psutil.Process()
        except psutil.Error as e:
            logger.warning(f"Memory sampling disabled: {e}")
            self.process = None

    def _rss(self) -> int:
        if self.process is None:
            return 0
        try:
            return self.process.memory_info().rss
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            logger.debug(f"Error sampling memory: {e}")
            return 0

    def start(self) -> None:
        """Reset the counters and take the baseline memory sample"""
        rss = self._rss()
        with self._lock:
            self.metrics = StreamMetrics(
                start_time=time.time(),
                memory_start=rss,
                memory_peak=rss
            )

    def record_chunk(self, bytes_in: int, bytes_out: int) -> None:
        """Record one transformed chunk"""
        with self._lock:
            self.metrics.chunks_processed += 1
            self.metrics.bytes_in += bytes_in
            self.metrics.bytes_out += bytes_out
            sample = self.metrics.chunks_processed % self.memory_sample_interval == 0
        if sample:
            rss = self._rss()
            with self._lock:
                self.metrics.memory_peak = max(self.metrics.memory_peak, rss)

    def record_error(self, error: Exception) -> None:
        """Record a read or write failure"""
        with self._lock:
            if isinstance(error, UpstreamReadError):
                self.metrics.read_errors += 1
            else:
                self.metrics.write_errors += 1

    def stop(self) -> StreamMetrics:
        """Mark the run finished and return its metrics"""
        rss = self._rss()
        with self._lock:
            self.metrics.end_time = time.time()
            self.metrics.memory_peak = max(self.metrics.memory_peak, rss)
            return self.metrics

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the run"""
        with self._lock:
            m = self.metrics
            return {
                'chunks': m.chunks_processed,
                'bytes_in': m.bytes_in,
                'bytes_out': m.bytes_out,
                'reduction_percent': m.reduction_percent,
                'duration': m.duration,
                'throughput_mb_per_sec': m.throughput_mb_per_sec,
                'read_errors': m.read_errors,
                'write_errors': m.write_errors,
                'memory_start': m.memory_start,
                'memory_peak': m.memory_peak,
                'memory_growth': m.memory_peak - m.memory_start
            }
