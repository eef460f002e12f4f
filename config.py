"""
Run configuration for the Hamming demo.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SweepConfig:
    # BSC crossover probabilities to simulate
    p_values: List[float] = field(default_factory=lambda: [0.001, 0.005, 0.01, 0.02, 0.05, 0.1])
    n_blocks: int = 2000
    max_workers: int = 1
    # path prefix for saved figures; None shows them interactively
    plot_prefix: Optional[str] = None


@dataclass
class RunConfig:
    m: Optional[int] = None  # prompted for when not given
    seed: Optional[int] = None  # None = fresh OS entropy every run
    output_path: str = "hamming_result.txt"
    # 1-indexed position to corrupt; None draws one uniformly
    error_position: Optional[int] = None
    inject_error: bool = True
    verbose: bool = False
    log_level: str = "WARNING"
    # dense m x (2^m - 1) matrix becomes impractical beyond this
    max_m: int = 20
    sweep: Optional[SweepConfig] = None
