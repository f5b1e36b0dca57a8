# Transformation library and statistics

from .transformations import (
    square,
    sqrt_approx,
    log_approx,
    sigmoid_approx,
    TRANSFORMS,
    get_transform,
    vectorized,
    is_vectorized,
)
from .statistics import (
    Summary,
    compute_stats,
    compute_stats_chunked,
    combine_chunk_stats,
    summarize,
)
