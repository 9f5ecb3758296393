"""StructlogParallelObserver — production observer that delegates to structlog."""

import structlog


class StructlogParallelObserver:
    """Logs parallel fan-out events to structlog.

    Does NOT inherit from ParallelObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def parallel_started(self, total_tasks: int, max_concurrency: int) -> None:
        self._log.info(
            "parallel.started",
            total_tasks=total_tasks,
            max_concurrency=max_concurrency,
        )

    def parallel_rejected(self, requested: int, maximum: int) -> None:
        self._log.error("parallel.rejected", requested=requested, maximum=maximum)

    def parallel_task_skipped(self, index: int, agent: str) -> None:
        self._log.warning("parallel.task_skipped", index=index, agent=agent)

    def parallel_completed(
        self, total_tasks: int, succeeded: int, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "parallel.completed",
            total_tasks=total_tasks,
            succeeded=succeeded,
            elapsed_seconds=round(elapsed_seconds, 2),
        )
