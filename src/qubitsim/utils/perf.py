"""
Performance profiling and memory estimation.

A dense state vector needs 16 * 2^n bytes; ``estimate_memory_requirements``
makes that scaling limit explicit, and ``PerformanceProfiler`` measures what a
simulation actually cost.
"""

import time
import logging
import psutil
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)

COMPLEX128_BYTES = 16  # 8 bytes real + 8 bytes imag


@dataclass
class ResourceSnapshot:
    """Snapshot of process resource usage."""

    timestamp: float
    cpu_percent: float
    memory_mb: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PerformanceMetrics:
    """Performance metrics for one profiled block."""

    name: str
    wall_time_seconds: float
    cpu_time_seconds: float
    peak_memory_mb: float
    memory_delta_mb: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def format_summary(self) -> str:
        """Format human-readable summary."""
        lines = [
            f"Performance: {self.name}",
            f"  Wall time: {self.wall_time_seconds:.3f}s",
            f"  CPU time:  {self.cpu_time_seconds:.3f}s",
            f"  Peak memory: {self.peak_memory_mb:.1f} MB",
            f"  Memory delta: {self.memory_delta_mb:+.1f} MB",
        ]
        return "\n".join(lines)


class PerformanceProfiler:
    """
    Context manager for profiling code blocks.

    Example:
        with PerformanceProfiler("sample") as prof:
            simulator.sample(circuit, shots=1000)

        print(prof.metrics.format_summary())
    """

    def __init__(self, name: str = "block"):
        self.name = name
        self.metrics: Optional[PerformanceMetrics] = None

        self._start_time: float = 0.0
        self._start_cpu: float = 0.0
        self._start_snapshot: Optional[ResourceSnapshot] = None

    def __enter__(self) -> "PerformanceProfiler":
        self._start_time = time.perf_counter()
        self._start_cpu = time.process_time()
        self._start_snapshot = self._get_resource_snapshot()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        end_time = time.perf_counter()
        end_cpu = time.process_time()
        end_snapshot = self._get_resource_snapshot()

        self.metrics = PerformanceMetrics(
            name=self.name,
            wall_time_seconds=end_time - self._start_time,
            cpu_time_seconds=end_cpu - self._start_cpu,
            peak_memory_mb=max(self._start_snapshot.memory_mb, end_snapshot.memory_mb),
            memory_delta_mb=end_snapshot.memory_mb - self._start_snapshot.memory_mb,
        )
        logger.debug(self.metrics.format_summary())

        return False  # Don't suppress exceptions

    @staticmethod
    def _get_resource_snapshot() -> ResourceSnapshot:
        process = psutil.Process()

        with process.oneshot():
            cpu_percent = process.cpu_percent()
            memory_mb = process.memory_info().rss / 1024 / 1024

        return ResourceSnapshot(
            timestamp=time.time(),
            cpu_percent=cpu_percent,
            memory_mb=memory_mb,
        )


def estimate_memory_requirements(
    n_qubits: int,
    overhead_factor: float = 1.5,
) -> Dict[str, float]:
    """
    Estimate memory needed to simulate ``n_qubits`` with a dense state vector.

    Args:
        n_qubits: Number of qubits
        overhead_factor: Multiplicative overhead for gate temporaries

    Returns:
        Dictionary with memory estimates in MB
    """
    state_bytes = 2**n_qubits * COMPLEX128_BYTES
    total_bytes = state_bytes * overhead_factor

    return {
        'state_size_mb': state_bytes / (1024 * 1024),
        'estimated_total_mb': total_bytes / (1024 * 1024),
        'overhead_factor': overhead_factor,
    }


def available_memory_mb() -> float:
    """Memory currently available to new allocations, in MB."""
    return psutil.virtual_memory().available / (1024 * 1024)
