"""Single-slot coalescing debounce on the asyncio event loop."""

import asyncio
from collections.abc import Awaitable, Callable

Action = Callable[[], Awaitable[None]]


class CoalescingDebouncer:
    """Runs the most recently armed action once the quiet period elapses.

    At most one action is pending at any time. Arming again replaces the
    pending action; once an action has started running it is never cancelled.
    """

    def __init__(self, delay_seconds: float) -> None:
        self.delay_seconds = delay_seconds
        self._pending: asyncio.Task[None] | None = None
        self._pending_action: Action | None = None
        self._running: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def arm(self, action: Action) -> None:
        """Schedule the action, superseding any pending one."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending_action = action
        self._pending = loop.create_task(self._fire_later(action))

    def cancel(self) -> bool:
        """Drop the pending action without running it."""
        task = self._pending
        if task is None:
            return False
        self._pending = None
        self._pending_action = None
        task.cancel()
        return True

    async def flush(self) -> None:
        """Run the pending action now instead of waiting for the timer."""
        action = self._pending_action
        if action is None:
            return
        self.cancel()
        await self._run(action)

    async def join(self) -> None:
        """Wait until nothing is pending or running."""
        while self._pending is not None or self._running:
            waiting = set(self._running)
            if self._pending is not None:
                waiting.add(self._pending)
            await asyncio.wait(waiting)

    async def _fire_later(self, action: Action) -> None:
        await asyncio.sleep(self.delay_seconds)
        # Drain the slot before running so a new arm() starts a fresh cycle.
        self._pending = None
        self._pending_action = None
        await self._run(action)

    async def _run(self, action: Action) -> None:
        task = asyncio.current_task()
        if task is not None:
            self._running.add(task)
        try:
            await action()
        finally:
            if task is not None:
                self._running.discard(task)
