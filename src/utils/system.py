"""
System capability detection for picking worker counts.

Auto-detects CPU cores and RAM so the transform engine can choose a
worker count and callers can check that the sample buffers they are
about to allocate fit in memory.

Usage:
    from utils.system import SystemCapabilities

    caps = SystemCapabilities.detect()
    print(f"Available RAM: {caps.available_ram_gb:.1f} GB")
    print(f"Workers: {caps.optimal_workers()}")
"""

import os
from dataclasses import dataclass

import psutil

FLOAT64_BYTES = 8


@dataclass
class SystemCapabilities:
    """System resource information for sizing decisions."""

    cpu_count: int
    total_ram_gb: float
    available_ram_gb: float

    # Budget parameters
    memory_fraction: float = 0.5  # Share of available RAM sample buffers may use

    @classmethod
    def detect(cls) -> 'SystemCapabilities':
        """Auto-detect system resources."""
        cpu_count = os.cpu_count() or 4

        mem = psutil.virtual_memory()
        total_ram_gb = mem.total / (1024**3)
        available_ram_gb = mem.available / (1024**3)

        return cls(
            cpu_count=cpu_count,
            total_ram_gb=total_ram_gb,
            available_ram_gb=available_ram_gb,
        )

    def optimal_workers(self, max_workers: int = 8, low_ram_threshold_gb: float = 2.0) -> int:
        """
        Compute a worker count for the parallel transform engine.

        One worker per core up to max_workers. Halved when RAM is low,
        since every transform allocates a full output buffer.
        """
        workers = max(1, min(self.cpu_count, max_workers))

        if self.available_ram_gb < low_ram_threshold_gb:
            return max(1, workers // 2)

        return workers

    def memory_budget_bytes(self) -> float:
        return self.available_ram_gb * (1024**3) * self.memory_fraction

    def buffers_fit_in_memory(self, n_samples: int, n_buffers: int = 1) -> bool:
        """
        Check whether n_buffers float64 buffers of n_samples fit the budget.

        A full demo run holds the input plus one buffer per transform.
        """
        needed = n_samples * n_buffers * FLOAT64_BYTES
        return needed <= self.memory_budget_bytes()

    def summary(self) -> str:
        """Human-readable summary of capabilities."""
        lines = [
            "=== System Capabilities ===",
            f"CPU cores: {self.cpu_count}",
            f"Total RAM: {self.total_ram_gb:.1f} GB",
            f"Available RAM: {self.available_ram_gb:.1f} GB",
            f"Memory budget: {self.memory_fraction*100:.0f}%",
            f"Suggested workers: {self.optimal_workers()}",
        ]
        return "\n".join(lines)


def get_system_capabilities() -> SystemCapabilities:
    """Convenience function to detect and return system capabilities."""
    return SystemCapabilities.detect()
