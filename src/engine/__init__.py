# Chunk partitioning and the parallel transform engine

from .partition import Chunk, partition, POLICIES, DEFAULT_POLICY
from .parallel_transform import (
    ParallelTransformEngine,
    TransformResultSet,
    transform,
    transform_one,
    DEFAULT_WORKERS,
)
from .config import DemoConfig
