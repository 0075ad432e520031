"""
Execution settings for scenario calculations.

Scenario values are independent of each other, so per-scenario work can
be spread over a pool of workers. ScenarioConfig decides whether that
happens; the default is sequential execution in the calling thread.
"""

from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from .errors import InvalidConfiguration


_EXECUTOR_KINDS = ("thread", "process")


@dataclass(frozen=True)
class ScenarioConfig:
    """
    Settings for running per-scenario calculations.

    Attributes:
        parallel: Run per-scenario functions on a worker pool
        max_workers: Pool size (None lets concurrent.futures decide)
        executor_kind: "thread" or "process"
        min_scenarios: Scenario count below which work stays sequential
    """
    parallel: bool = False
    max_workers: Optional[int] = None
    executor_kind: str = "thread"
    min_scenarios: int = 2

    def __post_init__(self):
        if self.executor_kind not in _EXECUTOR_KINDS:
            raise InvalidConfiguration(
                f"Unknown executor kind: {self.executor_kind}. Expected one of {_EXECUTOR_KINDS}"
            )
        if self.max_workers is not None and self.max_workers <= 0:
            raise InvalidConfiguration("max_workers must be positive")
        if self.min_scenarios < 1:
            raise InvalidConfiguration("min_scenarios must be at least 1")

    @classmethod
    def sequential(cls) -> "ScenarioConfig":
        """Everything in the calling thread."""
        return cls(parallel=False)

    @classmethod
    def threaded(cls, max_workers: Optional[int] = None) -> "ScenarioConfig":
        """Thread pool, suitable for numpy-heavy scenario functions."""
        return cls(parallel=True, max_workers=max_workers, executor_kind="thread")

    @classmethod
    def multiprocess(cls, max_workers: Optional[int] = None) -> "ScenarioConfig":
        """Process pool; scenario functions and values must be picklable."""
        return cls(parallel=True, max_workers=max_workers, executor_kind="process")

    def use_executor(self, scenario_count: int) -> bool:
        """Whether a pool is worth starting for this many scenarios."""
        return self.parallel and scenario_count >= self.min_scenarios

    @contextmanager
    def executor(self, scenario_count: int) -> Iterator[Optional[Executor]]:
        """
        Yield an executor for the duration of a calculation.

        Yields None when the work should run sequentially.
        """
        if not self.use_executor(scenario_count):
            yield None
            return

        pool_cls = ThreadPoolExecutor if self.executor_kind == "thread" else ProcessPoolExecutor
        with pool_cls(max_workers=self.max_workers) as pool:
            yield pool


DEFAULT_SCENARIO_CONFIG = ScenarioConfig.sequential()


__all__ = [
    "ScenarioConfig",
    "DEFAULT_SCENARIO_CONFIG",
]
