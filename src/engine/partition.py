"""
Static partitioning of an index range across a fixed set of workers.

partition(n, workers) splits [0, n) into exactly `workers` contiguous,
non-overlapping chunks whose union is [0, n). Two remainder policies:

    absorb    base = n // workers for every chunk, the last chunk is
              stretched to end at n (reference behaviour, default)
    balanced  the first n % workers chunks get one extra element

With n < workers the absorb policy gives every chunk size 0 except the
last, which holds all n elements.
"""

from dataclasses import dataclass
from typing import List

from utils.validation import InvalidArgumentError, check_count

POLICIES = ('absorb', 'balanced')
DEFAULT_POLICY = 'absorb'


@dataclass(frozen=True)
class Chunk:
    """Half-open index range [start, end) owned by one worker."""

    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    def as_slice(self) -> slice:
        return slice(self.start, self.end)


def check_policy(policy: str) -> str:
    if policy not in POLICIES:
        raise InvalidArgumentError(f"Unknown partition policy '{policy}', expected one of {POLICIES}")
    return policy


def partition(n: int, workers: int, policy: str = DEFAULT_POLICY) -> List[Chunk]:
    """
    Divide [0, n) into `workers` ordered chunks.

    Args:
        n: Number of indices (>= 0)
        workers: Number of chunks (>= 1)
        policy: 'absorb' or 'balanced'

    Returns:
        List of `workers` Chunks, some possibly empty
    """
    n = check_count(n, 'n')
    workers = check_count(workers, 'workers', minimum=1)
    check_policy(policy)

    chunks = []
    if policy == 'absorb':
        base_size = n // workers
        for k in range(workers):
            start = k * base_size
            end = n if k == workers - 1 else start + base_size
            chunks.append(Chunk(start, end))
    else:
        base_size, extra = divmod(n, workers)
        start = 0
        for k in range(workers):
            size = base_size + (1 if k < extra else 0)
            chunks.append(Chunk(start, start + size))
            start += size

    return chunks
