"""Per-key single-flight execution for asyncio.

Concurrent callers asking for the same key share one in-flight task
instead of each running the factory. Different keys never wait on
each other.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Hashable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight:
    """Deduplicate concurrent async work by key."""

    def __init__(self) -> None:
        self._calls: Dict[Hashable, asyncio.Future] = {}

    async def do(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        """Run ``factory`` once for all concurrent callers of ``key``.

        The shared task is shielded: cancelling one waiter does not cancel
        the work the other waiters depend on. Failures propagate to every
        waiter and are not remembered, so the next call starts over.
        """
        call = self._calls.get(key)
        if call is None:
            call = asyncio.ensure_future(factory())
            self._calls[key] = call
            call.add_done_callback(lambda done, k=key: self._forget(k, done))
        else:
            logger.debug(f"Joining in-flight call for {key!r}")
        return await asyncio.shield(call)

    def _forget(self, key: Hashable, call: asyncio.Future) -> None:
        if self._calls.get(key) is call:
            del self._calls[key]
        # Mark the exception as retrieved when every waiter was cancelled
        if not call.cancelled():
            call.exception()

    def in_flight(self, key: Hashable) -> bool:
        return key in self._calls

    def __len__(self) -> int:
        return len(self._calls)
