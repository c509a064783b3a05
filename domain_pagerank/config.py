# config.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Run configuration shared by every stage.  Defaults reproduce the
#   reference behavior: d = 0.9, epsilon = 1e-4, single precision, and
#   domains extracted relative to the "calpoly" label.

import dataclasses
import os
from dataclasses import dataclass

import numpy as np

from domain_pagerank.errors import ConfigError

PRECISIONS = {"float32": np.float32, "float64": np.float64}
MERGE_POLICIES = ("first", "error", "mean")
EXECUTORS = ("thread", "process")


def default_max_workers():
    """Same default as concurrent.futures.ThreadPoolExecutor."""
    return min(32, (os.cpu_count() or 4) + 4)


@dataclass(frozen=True)
class PageRankConfig:
    """
    Knobs for partitioning, power iteration, scheduling and merging.

    Args:
        damping:        probability of following a link (d)
        epsilon:        L1 convergence threshold between successive vectors
        max_iterations: iteration cap; exceeding it yields "not_converged"
        precision:      "float32" (reference) or "float64"
        root_label:     hostname label whose left neighbour names the domain
        merge_policy:   "first", "error" or "mean" for nodes claimed twice
        executor:       "thread" or "process" worker pool
        max_workers:    pool size (None = executor default)
        task_timeout:   per-partition deadline in seconds (None = no deadline)
        strict:         raise NonConvergenceError instead of returning a status
    """
    damping: float = 0.9
    epsilon: float = 1e-4
    max_iterations: int = 1000
    precision: str = "float32"
    root_label: str = "calpoly"
    merge_policy: str = "first"
    executor: str = "thread"
    max_workers: int = None
    task_timeout: float = None
    strict: bool = False

    def __post_init__(self):
        if not 0.0 < self.damping < 1.0:
            raise ConfigError(f"damping must be in (0, 1), got {self.damping}")
        if self.epsilon <= 0:
            raise ConfigError(f"epsilon must be positive, got {self.epsilon}")
        if self.max_iterations < 1:
            raise ConfigError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.precision not in PRECISIONS:
            raise ConfigError(f"unknown precision {self.precision!r}")
        if not self.root_label or '.' in self.root_label:
            raise ConfigError(f"root_label must be a single hostname label, got {self.root_label!r}")
        if self.merge_policy not in MERGE_POLICIES:
            raise ConfigError(f"unknown merge policy {self.merge_policy!r}")
        if self.executor not in EXECUTORS:
            raise ConfigError(f"unknown executor {self.executor!r}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.task_timeout is not None and self.task_timeout <= 0:
            raise ConfigError(f"task_timeout must be positive, got {self.task_timeout}")

    @property
    def numpy_dtype(self):
        return PRECISIONS[self.precision]

    @property
    def workers(self):
        return self.max_workers or default_max_workers()

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)
