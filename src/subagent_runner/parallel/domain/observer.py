"""ParallelObserver port — domain events emitted by the parallel aggregator."""

from typing import Protocol


class ParallelObserver(Protocol):
    """Observer port for parallel fan-out events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def parallel_started(self, total_tasks: int, max_concurrency: int) -> None: ...

    def parallel_rejected(self, requested: int, maximum: int) -> None: ...

    def parallel_task_skipped(self, index: int, agent: str) -> None: ...

    def parallel_completed(
        self, total_tasks: int, succeeded: int, elapsed_seconds: float
    ) -> None: ...
