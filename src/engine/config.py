"""
Run configuration for a generate -> transform -> summarize pass.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from engine.parallel_transform import DEFAULT_WORKERS
from engine.partition import DEFAULT_POLICY, check_policy
from utils.validation import check_count

DEFAULT_SAMPLES = 1_000_000


@dataclass
class DemoConfig:
    """Sizes, worker count and report options for one run."""

    n_samples: int = DEFAULT_SAMPLES
    n_workers: int = DEFAULT_WORKERS
    policy: str = DEFAULT_POLICY
    seed: Optional[int] = None
    preview: int = 5          # Raw / transformed samples shown
    result_preview: int = 3   # Samples shown per library transform
    output_path: Optional[str] = None

    def __post_init__(self):
        self.n_samples = check_count(self.n_samples, 'n_samples')
        self.n_workers = check_count(self.n_workers, 'n_workers', minimum=1)
        check_policy(self.policy)
        self.preview = check_count(self.preview, 'preview')
        self.result_preview = check_count(self.result_preview, 'result_preview')
        if self.seed is not None:
            self.seed = check_count(self.seed, 'seed')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'n_samples': self.n_samples,
            'n_workers': self.n_workers,
            'policy': self.policy,
            'seed': self.seed,
            'preview': self.preview,
            'result_preview': self.result_preview,
            'output_path': self.output_path,
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'DemoConfig':
        return cls(**config_dict)
