"""
Generate random samples, transform them in parallel and print statistics.

Usage:
    python -m reporting.run_demo --samples 1000000 --workers 4
    python -m reporting.run_demo -n 10000 -w auto --policy balanced -o results.h5
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from analysis.statistics import compute_stats, summarize
from analysis.transformations import square
from data.buffer_store import save_results_h5
from data.sample_buffer import NumpyRandomSource, generate
from engine.config import DEFAULT_SAMPLES, DemoConfig
from engine.parallel_transform import DEFAULT_WORKERS, ParallelTransformEngine
from engine.partition import POLICIES
from reporting.console import print_report
from utils.system import get_system_capabilities

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for command-line runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{text}'")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def _worker_count(text: str) -> Optional[int]:
    if text == "auto":
        return None
    value = _non_negative_int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("workers must be >= 1")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parallel elementwise transforms and summary statistics")
    parser.add_argument("--samples", "-n", type=_non_negative_int, default=DEFAULT_SAMPLES,
                        help="Number of random samples to generate")
    parser.add_argument("--workers", "-w", type=_worker_count, default=DEFAULT_WORKERS,
                        help="Worker count, or 'auto' to size from CPU/RAM")
    parser.add_argument("--policy", choices=POLICIES, default="absorb",
                        help="How the remainder of samples/workers is distributed")
    parser.add_argument("--seed", type=_non_negative_int, default=None,
                        help="Random seed (default: unseeded)")
    parser.add_argument("--preview", type=_non_negative_int, default=5,
                        help="Raw and squared samples shown in the report")
    parser.add_argument("--result-preview", type=_non_negative_int, default=3,
                        help="Samples shown per library transform")
    parser.add_argument("--output", "-o", type=str, default=None,
                        help="Optional HDF5 file for buffers and statistics")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Debug logging")
    return parser


def run(config: DemoConfig) -> None:
    """Execute one full run and print the report."""
    caps = get_system_capabilities()
    # Input + one squared pass + four library outputs
    if not caps.buffers_fit_in_memory(config.n_samples, n_buffers=6):
        logger.warning(
            f"{config.n_samples:,} samples x 6 buffers exceeds the memory budget "
            f"({caps.available_ram_gb:.1f} GB available)"
        )

    start_time = time.perf_counter()

    samples = generate(config.n_samples, NumpyRandomSource(config.seed))
    sample_stats = compute_stats(samples)

    engine = ParallelTransformEngine(workers=config.n_workers, policy=config.policy)
    squared = engine.transform_one(samples, square)
    results = engine.apply_library(samples)
    result_stats = summarize(results)

    elapsed = time.perf_counter() - start_time

    print_report(
        samples, sample_stats, squared, results, result_stats,
        n_workers=config.n_workers,
        preview=config.preview,
        result_preview=config.result_preview,
        elapsed=elapsed,
    )

    if config.output_path is not None:
        save_results_h5(config.output_path, samples, results, sample_stats, result_stats)
        print(f"\nSaved buffers and statistics to {config.output_path}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    n_workers = args.workers
    if n_workers is None:
        n_workers = get_system_capabilities().optimal_workers()
        print(f"Auto-detected optimal workers: {n_workers}")

    config = DemoConfig(
        n_samples=args.samples,
        n_workers=n_workers,
        policy=args.policy,
        seed=args.seed,
        preview=args.preview,
        result_preview=args.result_preview,
        output_path=args.output,
    )
    run(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
