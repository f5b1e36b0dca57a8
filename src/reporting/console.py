"""
Plain-text report for a generate -> transform -> summarize run.
"""

from typing import Dict, Optional, Sequence

import numpy as np

from analysis.statistics import Summary
from engine.parallel_transform import TransformResultSet

RULE = "=" * 50


def _format_values(values: Sequence[float]) -> str:
    return "[" + ", ".join(f"{v:.6f}" for v in values) + "]"


def _format_summary(summary: Summary, indent: str = "  ") -> list:
    return [
        f"{indent}Mean:    {summary.mean:.6f}",
        f"{indent}Std dev: {summary.std_dev:.6f}",
        f"{indent}Min:     {summary.min:.6f}",
        f"{indent}Max:     {summary.max:.6f}",
    ]


def format_report(
    samples: np.ndarray,
    sample_stats: Summary,
    squared: np.ndarray,
    results: TransformResultSet,
    result_stats: Dict[str, Summary],
    n_workers: int,
    preview: int = 5,
    result_preview: int = 3,
    elapsed: Optional[float] = None,
) -> str:
    """
    Build the run report.

    Sections: header, first raw samples, input statistics, first squared
    samples, first results per library transform, statistics per
    library transform.
    """
    lines = [
        RULE,
        "Parallel Transform & Statistics Demo",
        RULE,
        f"Samples: {len(samples):,}",
        f"Workers: {n_workers}",
        "",
        f"First {min(preview, len(samples))} samples: {_format_values(samples[:preview])}",
        "",
        "Input statistics:",
        *_format_summary(sample_stats),
        "",
        f"First {min(preview, len(squared))} squared: {_format_values(squared[:preview])}",
        "",
        "Transformations:",
    ]
    for name, buf in results:
        lines.append(f"  {name}: {_format_values(buf[:result_preview])}")

    lines += ["", "Transformation statistics:"]
    for name, summary in result_stats.items():
        lines.append(f"  {name}:")
        lines += _format_summary(summary, indent="    ")

    if elapsed is not None:
        lines += ["", f"Elapsed: {elapsed:.3f}s"]
    lines.append(RULE)
    return "\n".join(lines)


def print_report(*args, **kwargs) -> None:
    """format_report(...) written to stdout."""
    print(format_report(*args, **kwargs))
