"""Managed connection contract consumed by the connection manager."""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from loguru import logger

from homelink.connections.health import HealthState

UnhealthyHandler = Callable[[], None]
ReconnectedHandler = Callable[[], Awaitable[None] | None]


class ManagedConnection(ABC):
    """
    Abstract contract for one long-lived external connection.

    Adapters own heartbeat and timeout detection for their transport and report
    two discrete events: unhealthy (the link failed) and reconnected (the link
    is fully operative again after an outage). Subscribers are kept in
    per-instance lists; adapters call `_emit_unhealthy` / `_emit_reconnected`
    exactly when the event happens.
    """

    name: str = "base"
    transport: str = "unknown"

    def __init__(self) -> None:
        self._unhealthy_handlers: list[UnhealthyHandler] = []
        self._reconnected_handlers: list[ReconnectedHandler] = []
        self._handler_tasks: set[asyncio.Task] = set()

    @abstractmethod
    def get_health_state(self) -> HealthState:
        """Return current health without side effects."""

    @abstractmethod
    async def start(self) -> None:
        """Open the connection and begin health monitoring."""

    @abstractmethod
    async def stop(self) -> None:
        """Close the connection without reconnecting."""

    @abstractmethod
    async def force_reconnect(self) -> None:
        """Close the current transport and open a fresh one."""

    def on_unhealthy(self, handler: UnhealthyHandler) -> None:
        self._unhealthy_handlers.append(handler)

    def on_reconnected(self, handler: ReconnectedHandler) -> None:
        self._reconnected_handlers.append(handler)

    def _emit_unhealthy(self) -> None:
        for handler in list(self._unhealthy_handlers):
            try:
                handler()
            except Exception as e:
                logger.warning(f"{self.name} unhealthy handler failed: {e}")

    def _emit_reconnected(self) -> None:
        for handler in list(self._reconnected_handlers):
            try:
                result = handler()
            except Exception as e:
                logger.warning(f"{self.name} reconnected handler failed: {e}")
                continue
            if inspect.isawaitable(result):
                self._track(result)

    def _track(self, awaitable: Awaitable[None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.error(f"{self.name} reconnected handler dropped: no running event loop")
            return
        task = asyncio.ensure_future(awaitable, loop=loop)
        self._handler_tasks.add(task)
        task.add_done_callback(self._on_handler_done)

    def _on_handler_done(self, task: asyncio.Task) -> None:
        self._handler_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f"{self.name} reconnected handler failed: {exc}")
