"""map_concurrent — order-preserving async map with a fixed number of workers."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence


async def map_concurrent[T, R](
    items: Sequence[T],
    max_concurrency: int,
    fn: Callable[[T, int], Awaitable[R]],
) -> list[R]:
    """Apply *fn* to every item with at most *max_concurrency* calls in flight.

    The output list is index-aligned with *items* whatever the completion
    order. The worker count is clamped to [1, len(items)]; an empty input
    returns [] without calling *fn*. The first unexpected exception raised by
    *fn* cancels the remaining workers and propagates.
    """
    if not items:
        return []

    worker_count = max(1, min(max_concurrency, len(items)))
    results: list[R | None] = [None] * len(items)
    # Claiming an index never awaits, so the shared counter needs no lock.
    next_index = 0

    async def _worker() -> None:
        nonlocal next_index
        while next_index < len(items):
            index = next_index
            next_index += 1
            results[index] = await fn(items[index], index)

    try:
        async with asyncio.TaskGroup() as tg:
            for _ in range(worker_count):
                tg.create_task(_worker())
    except ExceptionGroup as eg:
        raise eg.exceptions[0] from None

    return results  # type: ignore[return-value]
