import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)

_background: set[asyncio.Task] = set()


def spawn_detached(coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
    """Run ``coro`` without awaiting it.

    The caller never observes the outcome: a failure is logged here and goes
    no further. Must be called with a running event loop.
    """
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _background.add(task)
    task.add_done_callback(_reap)
    return task


def _reap(task: asyncio.Task) -> None:
    _background.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("Detached task %s failed: %s", task.get_name(), exc)


def pending_count() -> int:
    return len(_background)
