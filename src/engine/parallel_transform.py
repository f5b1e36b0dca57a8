"""
Parallel chunked transform engine.

Applies one or more elementwise transforms to every index of a sample
buffer using a fixed number of workers. Each worker owns exactly one
chunk of the index space (see engine.partition).

Key Design Decisions:
1. Output buffers are allocated and zeroed before dispatch
2. Each worker gets views over its own index range of the input and of
   every output, so no two workers ever write the same index
3. The input is handed out as a read-only view
4. The call blocks until every worker has finished (barrier); the caller
   never sees partial results
5. The worker pool is injected as a concurrent.futures.Executor. Workers
   write into shared memory, so it must be thread-based

Transforms are plain float -> float functions: output_t[i] = t(input[i]).
Functions marked with analysis.transformations.vectorized (the whole
library) are called once per chunk on the chunk view instead, which
gives the same values far faster.

Usage:
    from engine.parallel_transform import ParallelTransformEngine

    engine = ParallelTransformEngine(workers=4)
    results = engine.apply_library(samples)
    for name, buf in results:
        print(name, buf[:3])
"""

import contextlib
import logging
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from analysis.transformations import TRANSFORMS, is_vectorized
from engine.partition import DEFAULT_POLICY, Chunk, check_policy, partition
from utils.validation import InvalidArgumentError, as_buffer, check_count

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4

Transform = Callable[[float], float]


@dataclass
class TransformResultSet:
    """Output buffers of a multi-transform pass, associated with names by position."""

    names: Tuple[str, ...]
    buffers: List[np.ndarray]

    def __post_init__(self):
        self.names = tuple(self.names)
        if len(self.names) != len(self.buffers):
            raise ValueError(
                f"Got {len(self.names)} names for {len(self.buffers)} buffers"
            )

    def __len__(self) -> int:
        return len(self.buffers)

    def __iter__(self) -> Iterator[Tuple[str, np.ndarray]]:
        return iter(zip(self.names, self.buffers))

    def __getitem__(self, key: Union[int, str]) -> np.ndarray:
        if isinstance(key, str):
            if key not in self.names:
                raise KeyError(f"No result named '{key}'")
            return self.buffers[self.names.index(key)]
        return self.buffers[key]

    def items(self) -> List[Tuple[str, np.ndarray]]:
        return list(zip(self.names, self.buffers))


def _apply(fn: Transform, in_view: np.ndarray) -> np.ndarray:
    """fn over one chunk: a single array call if vectorized, else per element."""
    if is_vectorized(fn):
        return np.asarray(fn(in_view), dtype=np.float64)
    return np.fromiter((fn(float(x)) for x in in_view), dtype=np.float64, count=len(in_view))


def _run_chunk(
    chunk: Chunk,
    in_view: np.ndarray,
    out_views: Sequence[np.ndarray],
    transforms: Sequence[Transform],
) -> Chunk:
    """Worker body: fill this chunk's slice of every output buffer."""
    for fn, out_view in zip(transforms, out_views):
        result = _apply(fn, in_view)
        if result.shape != in_view.shape:
            raise ValueError(
                f"Transform {getattr(fn, '__name__', fn)!r} returned shape {result.shape} "
                f"for chunk [{chunk.start}, {chunk.end}), expected {in_view.shape}"
            )
        out_view[...] = result
    return chunk


class ParallelTransformEngine:
    """
    Fixed-worker elementwise transform engine.

    Args:
        workers: Number of chunks / concurrent workers (>= 1)
        executor: Optional thread-based Executor to run the chunks on. Left
                  open after each call. When None, a ThreadPoolExecutor
                  with `workers` threads is created and shut down per call.
        policy: Partition remainder policy, 'absorb' or 'balanced'
    """

    def __init__(
        self,
        workers: int = DEFAULT_WORKERS,
        executor: Optional[Executor] = None,
        policy: str = DEFAULT_POLICY,
    ):
        self.workers = check_count(workers, 'workers', minimum=1)
        self.policy = check_policy(policy)
        if isinstance(executor, ProcessPoolExecutor):
            raise InvalidArgumentError(
                "Process pools cannot write into shared output buffers; use a thread-based executor"
            )
        self.executor = executor

    def _pool(self):
        if self.executor is not None:
            return contextlib.nullcontext(self.executor)
        return ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix='transform')

    def transform(self, data, transforms: Sequence[Transform]) -> List[np.ndarray]:
        """
        Apply every transform to every element of data.

        Args:
            data: 1-D buffer of floats
            transforms: Ordered, non-empty sequence of pure elementwise functions

        Returns:
            One float64 buffer per transform, same order and length as data
        """
        buf = as_buffer(data)
        transforms = list(transforms)
        if not transforms:
            raise InvalidArgumentError("At least one transform is required")

        n = len(buf)
        readonly = buf.view()
        readonly.flags.writeable = False

        outputs = [np.zeros(n, dtype=np.float64) for _ in transforms]
        chunks = [c for c in partition(n, self.workers, self.policy) if c.size > 0]

        logger.debug(
            f"Dispatching {len(chunks)} chunks of {n:,} samples "
            f"({len(transforms)} transforms, {self.workers} workers, policy={self.policy})"
        )

        start_time = time.perf_counter()
        with self._pool() as pool:
            futures = [
                pool.submit(
                    _run_chunk,
                    chunk,
                    readonly[chunk.as_slice()],
                    [out[chunk.as_slice()] for out in outputs],
                    transforms,
                )
                for chunk in chunks
            ]
            wait(futures)

        # Re-raise the first worker failure, in chunk order
        for future in futures:
            future.result()

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Transformed {n:,} samples x {len(transforms)} in {elapsed:.3f}s "
            f"with {self.workers} workers"
        )
        return outputs

    def transform_one(self, data, fn: Transform) -> np.ndarray:
        """Single-transform case: returns one output buffer."""
        return self.transform(data, [fn])[0]

    def apply_library(self, data, names: Optional[Sequence[str]] = None) -> TransformResultSet:
        """
        Apply the library transforms in one pass.

        Args:
            data: 1-D buffer of floats
            names: Subset of analysis.transformations.TRANSFORMS to apply
                   (default: all four, in library order)
        """
        if names is None:
            names = list(TRANSFORMS)
        missing = [name for name in names if name not in TRANSFORMS]
        if missing:
            raise KeyError(f"Unknown transforms {missing}, expected names from {list(TRANSFORMS)}")

        buffers = self.transform(data, [TRANSFORMS[name] for name in names])
        return TransformResultSet(names=tuple(names), buffers=buffers)


def transform(
    data,
    workers: int,
    transforms: Sequence[Transform],
    executor: Optional[Executor] = None,
    policy: str = DEFAULT_POLICY,
) -> List[np.ndarray]:
    """One-off ParallelTransformEngine(workers, executor, policy).transform(...)."""
    engine = ParallelTransformEngine(workers=workers, executor=executor, policy=policy)
    return engine.transform(data, transforms)


def transform_one(
    data,
    workers: int,
    fn: Transform,
    executor: Optional[Executor] = None,
    policy: str = DEFAULT_POLICY,
) -> np.ndarray:
    """One-off single-transform call."""
    engine = ParallelTransformEngine(workers=workers, executor=executor, policy=policy)
    return engine.transform_one(data, fn)
