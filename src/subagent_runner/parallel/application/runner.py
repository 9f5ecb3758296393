"""ParallelRunner — fans tasks out to an AgentRunner and merges their live progress."""

import asyncio
import time
from collections.abc import Callable
from contextlib import suppress

from subagent_runner.core.cancellation import CancellationToken
from subagent_runner.parallel.application.concurrency import map_concurrent
from subagent_runner.parallel.application.errors import TooManyTasksError
from subagent_runner.parallel.domain.observer import ParallelObserver
from subagent_runner.parallel.domain.outcome import ParallelOutcome
from subagent_runner.parallel.domain.task import TaskItem
from subagent_runner.run.domain.progress import ProgressCallback, ProgressUpdate
from subagent_runner.run.domain.result import RunResult
from subagent_runner.run.domain.runner import AgentRunner

DEFAULT_MAX_TASKS = 8
DEFAULT_MAX_CONCURRENCY = 4
DEFAULT_HEARTBEAT_SECONDS = 1.0

_NOT_STARTED_MESSAGE = "Subagent was aborted before it started."


class ParallelRunner:
    """Runs a bounded batch of tasks concurrently and reports one merged progress view.

    Every task owns one slot in a placeholder list that is index-aligned with
    the request. Each task's handler writes only to its own slot, so the list
    needs no locking under the single-threaded event loop.

    The runner is free of infrastructure dependencies: it receives an
    AgentRunner so that tests can swap in a fake without spawning processes.
    """

    def __init__(
        self,
        runner: AgentRunner,
        observer: ParallelObserver,
        max_tasks: int = DEFAULT_MAX_TASKS,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        heartbeat_interval_seconds: float | None = DEFAULT_HEARTBEAT_SECONDS,
    ) -> None:
        self._runner = runner
        self._observer = observer
        self._max_tasks = max_tasks
        self._max_concurrency = max_concurrency
        self._heartbeat_interval_seconds = heartbeat_interval_seconds

    async def run(
        self,
        tasks: list[TaskItem],
        cancel: CancellationToken | None = None,
        on_update: ProgressCallback | None = None,
    ) -> ParallelOutcome:
        """Run every task and return the results in request order.

        Tasks still queued when *cancel* fires are not started; their slots
        come back as aborted results.

        Raises:
            TooManyTasksError: if more than max_tasks tasks are requested.
                Raised before any slot is created or any process spawned.
        """
        if len(tasks) > self._max_tasks:
            self._observer.parallel_rejected(
                requested=len(tasks), maximum=self._max_tasks
            )
            raise TooManyTasksError(requested=len(tasks), maximum=self._max_tasks)

        self._observer.parallel_started(
            total_tasks=len(tasks), max_concurrency=self._max_concurrency
        )
        started_at = time.monotonic()

        slots = [RunResult(agent=item.agent, task=item.task) for item in tasks]

        def emit() -> None:
            if on_update is not None:
                on_update(_aggregate_update(slots))

        async def run_slot(item: TaskItem, index: int) -> RunResult:
            if cancel is not None and cancel.cancelled:
                self._observer.parallel_task_skipped(index=index, agent=item.agent)
                result = slots[index].snapshot()
                result.mark_aborted(_NOT_STARTED_MESSAGE)
            else:

                def on_slot_update(update: ProgressUpdate) -> None:
                    if update.results:
                        slots[index] = update.results[0]
                        emit()

                result = await self._runner.run(
                    task=item.task,
                    agent_name=item.agent,
                    cwd=item.cwd,
                    cancel=cancel,
                    on_update=on_slot_update,
                )
            slots[index] = result
            emit()
            return result

        heartbeat = (
            asyncio.create_task(self._heartbeat(slots=slots, emit=emit))
            if on_update is not None and self._heartbeat_interval_seconds
            else None
        )
        try:
            results = await map_concurrent(tasks, self._max_concurrency, run_slot)
        finally:
            if heartbeat is not None:
                heartbeat.cancel()
                with suppress(asyncio.CancelledError):
                    await heartbeat

        outcome = ParallelOutcome(results=results)
        self._observer.parallel_completed(
            total_tasks=len(results),
            succeeded=outcome.success_count,
            elapsed_seconds=time.monotonic() - started_at,
        )
        return outcome

    async def _heartbeat(
        self, slots: list[RunResult], emit: Callable[[], None]
    ) -> None:
        """Re-emit the merged view on a fixed interval while any slot is running."""
        assert self._heartbeat_interval_seconds is not None
        while any(slot.is_running for slot in slots):
            await asyncio.sleep(self._heartbeat_interval_seconds)
            if any(slot.is_running for slot in slots):
                emit()


def _aggregate_update(slots: list[RunResult]) -> ProgressUpdate:
    running = sum(1 for slot in slots if slot.is_running)
    done = len(slots) - running
    return ProgressUpdate(
        content=f"Parallel: {done}/{len(slots)} done, {running} running...",
        mode="parallel",
        results=[slot.snapshot() for slot in slots],
    )
