import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger("app")

Task = Callable[[], Union[Any, Awaitable[Any]]]


class WriteSerializer:
    """
    FIFO executor that runs one task at a time.

    Tasks are started in the order enqueue() was called. A task that raises
    only fails its own caller; the next task still runs. If the caller is
    cancelled while waiting, the task itself keeps its place and runs to
    completion.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._pending = 0
        self._tasks = set()

    @property
    def pending(self) -> int:
        """Number of tasks enqueued and not yet finished"""
        return self._pending

    async def _run(self, task: Task) -> Any:
        try:
            async with self._lock:
                result = task()
                if inspect.isawaitable(result):
                    result = await result
                return result
        finally:
            self._pending -= 1

    async def enqueue(self, task: Task) -> Any:
        self._pending += 1
        # The future is created and scheduled before the caller yields, so
        # arrival order is the order the lock is requested in.
        future = asyncio.ensure_future(self._run(task))
        self._tasks.add(future)
        future.add_done_callback(self._tasks.discard)
        try:
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            future.add_done_callback(_log_orphaned_failure)
            raise


def _log_orphaned_failure(future: "asyncio.Future") -> None:
    # The caller is gone, so nobody else will look at the outcome
    if not future.cancelled() and future.exception() is not None:
        logger.error(f"Queued write failed after its caller disconnected: {future.exception()}")
