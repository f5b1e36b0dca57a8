"""
Unit tests for SystemCapabilities auto-detection.

Tests resource detection, the worker count suggested for the transform
engine, and the buffer memory check.

Priority: 🟡 Medium - a bad worker count slows runs but cannot corrupt them.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import patch, MagicMock

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.system import SystemCapabilities, get_system_capabilities


def make_caps(cpu_count=4, total_ram_gb=16.0, available_ram_gb=12.0):
    return SystemCapabilities(
        cpu_count=cpu_count,
        total_ram_gb=total_ram_gb,
        available_ram_gb=available_ram_gb,
    )


# =============================================================================
# Basic Detection Tests
# =============================================================================

class TestSystemCapabilitiesDetection:
    """Tests for basic system detection functionality."""

    def test_detect_returns_capabilities(self):
        """Detection should return SystemCapabilities instance."""
        caps = SystemCapabilities.detect()

        assert isinstance(caps, SystemCapabilities)
        assert isinstance(caps.cpu_count, int)
        assert isinstance(caps.total_ram_gb, float)
        assert isinstance(caps.available_ram_gb, float)

    def test_cpu_count_positive(self):
        caps = SystemCapabilities.detect()
        assert caps.cpu_count >= 1

    def test_available_less_than_total(self):
        caps = SystemCapabilities.detect()
        assert caps.available_ram_gb <= caps.total_ram_gb

    def test_memory_fraction_default(self):
        caps = SystemCapabilities.detect()
        assert caps.memory_fraction == 0.5

    def test_cpu_count_fallback(self):
        """os.cpu_count() returning None falls back to 4."""
        fake_mem = MagicMock(total=16 * 1024**3, available=8 * 1024**3)
        with patch('utils.system.os.cpu_count', return_value=None), \
                patch('utils.system.psutil.virtual_memory', return_value=fake_mem):
            caps = SystemCapabilities.detect()

        assert caps.cpu_count == 4
        assert caps.total_ram_gb == 16.0
        assert caps.available_ram_gb == 8.0


# =============================================================================
# Optimal Workers Tests
# =============================================================================

class TestOptimalWorkers:
    """Tests for optimal_workers computation."""

    def test_at_least_one(self):
        """The engine rejects 0 workers, so never suggest it."""
        assert SystemCapabilities.detect().optimal_workers() >= 1

    def test_one_per_core(self):
        assert make_caps(cpu_count=4).optimal_workers() == 4

    def test_capped(self):
        assert make_caps(cpu_count=64).optimal_workers(max_workers=8) == 8

    def test_low_ram_halves_workers(self):
        caps = make_caps(cpu_count=8, available_ram_gb=1.0)
        assert caps.optimal_workers(low_ram_threshold_gb=2.0) == 4

    def test_single_cpu_low_ram(self):
        caps = make_caps(cpu_count=1, available_ram_gb=0.1)
        assert caps.optimal_workers() == 1


# =============================================================================
# Memory Budget Tests
# =============================================================================

class TestBuffersFitInMemory:

    def test_small_run_fits(self):
        assert make_caps(available_ram_gb=4.0).buffers_fit_in_memory(1_000_000, n_buffers=6)

    def test_large_run_does_not_fit(self):
        # 1e9 samples * 8 bytes * 6 buffers = 48 GB > 2 GB budget
        assert not make_caps(available_ram_gb=4.0).buffers_fit_in_memory(10**9, n_buffers=6)

    def test_budget_uses_fraction(self):
        caps = make_caps(available_ram_gb=1.0)
        assert caps.memory_budget_bytes() == pytest.approx(0.5 * 1024**3)


# =============================================================================
# Summary and Convenience Tests
# =============================================================================

class TestSummaryAndConvenience:

    def test_summary_contains_key_info(self):
        summary = make_caps().summary()

        assert "CPU cores: 4" in summary
        assert "Available RAM" in summary
        assert "Suggested workers: 4" in summary

    def test_get_system_capabilities_works(self):
        assert isinstance(get_system_capabilities(), SystemCapabilities)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
