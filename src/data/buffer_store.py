"""
HDF5 persistence for sample buffers, transform results and their stats.

Layout:
    /input                    float64 (N,), Summary as attributes
    /transforms               group, attribute 'order' = transform names
    /transforms/<name>        float64 (N,), Summary as attributes

Summaries live in dataset attributes (mean, std_dev, min, max), the same
way normalization stats are attached to activation datasets.
"""

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import h5py
import numpy as np

from analysis.statistics import Summary
from engine.parallel_transform import TransformResultSet

SUMMARY_FIELDS = ('mean', 'std_dev', 'min', 'max')
INPUT_KEY = 'input'
TRANSFORMS_GROUP = 'transforms'

PathLike = Union[str, Path]


def _write_summary(dset: h5py.Dataset, summary: Summary) -> None:
    for key, value in summary.as_dict().items():
        dset.attrs[key] = value


def _decode(name) -> str:
    return name.decode('utf-8') if isinstance(name, bytes) else str(name)


def save_results_h5(
    h5_path: PathLike,
    input_buffer: np.ndarray,
    results: TransformResultSet,
    input_stats: Optional[Summary] = None,
    result_stats: Optional[Dict[str, Summary]] = None,
) -> None:
    """Write the input buffer, every result buffer and optional summaries (overwrites)."""
    result_stats = result_stats or {}

    with h5py.File(h5_path, 'w') as f:
        dset = f.create_dataset(INPUT_KEY, data=np.asarray(input_buffer, dtype=np.float64))
        if input_stats is not None:
            _write_summary(dset, input_stats)

        grp = f.create_group(TRANSFORMS_GROUP)
        grp.attrs['order'] = np.array(results.names, dtype=h5py.string_dtype())
        for name, buf in results:
            dset = grp.create_dataset(name, data=buf)
            if name in result_stats:
                _write_summary(dset, result_stats[name])


def load_results_h5(h5_path: PathLike) -> Tuple[np.ndarray, TransformResultSet]:
    """Read back (input buffer, TransformResultSet) written by save_results_h5."""
    with h5py.File(h5_path, 'r') as f:
        if INPUT_KEY not in f:
            raise KeyError(f"Dataset '{INPUT_KEY}' not found in {h5_path}")
        input_buffer = f[INPUT_KEY][()]

        names: Tuple[str, ...] = ()
        buffers = []
        if TRANSFORMS_GROUP in f:
            grp = f[TRANSFORMS_GROUP]
            names = tuple(_decode(n) for n in grp.attrs.get('order', sorted(grp.keys())))
            buffers = [grp[name][()] for name in names]

    return input_buffer, TransformResultSet(names=names, buffers=buffers)


def load_summary_h5(h5_path: PathLike, dataset_key: str) -> Optional[Summary]:
    """Load the Summary attached to a dataset, or None if it has none."""
    with h5py.File(h5_path, 'r') as f:
        if dataset_key not in f:
            raise KeyError(f"Dataset '{dataset_key}' not found in {h5_path}")
        attrs = f[dataset_key].attrs
        if all(key in attrs for key in SUMMARY_FIELDS):
            return Summary.from_dict({key: attrs[key] for key in SUMMARY_FIELDS})
    return None
