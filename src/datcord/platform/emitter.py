"""
Named-channel event emitter.

Listeners are called in subscription order. Plain functions run inline;
coroutine functions are scheduled as tasks on the running loop, so a slow
listener never blocks the gateway's reader loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """
    Channel name -> ordered list of listeners.

    Example:
        emitter = EventEmitter()

        @emitter.on("gateway.event.MESSAGE_CREATE")
        async def on_message(payload):
            print(payload["content"])

        emitter.emit("gateway.event.MESSAGE_CREATE", {"content": "hi"})
    """

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._tasks: set[asyncio.Task] = set()

    def on(self, event: str, listener: Listener | None = None):
        """Subscribe to a channel. Usable as a decorator when listener is omitted."""
        if listener is None:
            return lambda fn: self.on(event, fn)
        self._listeners[event].append(listener)
        return listener

    def once(self, event: str, listener: Listener | None = None):
        """Subscribe for a single emission only."""
        if listener is None:
            return lambda fn: self.once(event, fn)

        def wrapper(*args: Any) -> Any:
            self.off(event, wrapper)
            return listener(*args)

        wrapper.__wrapped__ = listener  # type: ignore[attr-defined]
        self._listeners[event].append(wrapper)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        """Remove the first matching subscription. Unknown listeners are ignored."""
        listeners = self._listeners.get(event)
        if not listeners:
            return
        for i, registered in enumerate(listeners):
            if registered is listener or getattr(registered, "__wrapped__", None) is listener:
                del listeners[i]
                break
        if not listeners:
            del self._listeners[event]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Call every listener of `event` with `args`.

        Returns True if the channel had listeners. A listener that raises is
        logged and does not stop delivery to the remaining listeners.
        """
        listeners = list(self._listeners.get(event, ()))
        for listener in listeners:
            try:
                result = listener(*args)
            except Exception:
                logger.exception(f"Listener for '{event}' failed")
                continue
            if inspect.iscoroutine(result):
                task = asyncio.create_task(result)
                self._tasks.add(task)
                task.add_done_callback(self._on_task_done)
        return bool(listeners)

    async def drain(self) -> None:
        """Wait for every scheduled coroutine listener to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Async listener failed", exc_info=exc)
