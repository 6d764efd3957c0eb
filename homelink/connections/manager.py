"""Registry that keeps named connections healthy and resynced."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import dataclass
from typing import Any

from loguru import logger

from homelink.config.schema import Config
from homelink.connections.base import ManagedConnection
from homelink.connections.health import HealthState

ResyncCallback = Callable[[], Awaitable[None] | None]


@dataclass(slots=True)
class ManagedConnectionEntry:
    """One registered connection and the resync to run after it reconnects."""

    name: str
    connection: ManagedConnection
    resync: ResyncCallback | None = None


class ConnectionManager:
    """
    Orchestrates several persistent connections under one health policy.

    An unhealthy connection is force-reconnected; a reconnected connection has
    the resync registered under its name replayed. Every failure is isolated to
    the connection it belongs to and only surfaces in the logs.
    """

    def __init__(self, *, dedupe_reconnects: bool = False) -> None:
        self._connections: dict[str, ManagedConnectionEntry] = {}
        self._logger = logger.bind(component="ConnectionManager")
        self._started = False
        self.dedupe_reconnects = bool(dedupe_reconnects)
        self._reconnecting: set[ManagedConnection] = set()
        self._inflight_tasks: set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: Config) -> "ConnectionManager":
        return cls(dedupe_reconnects=config.manager.dedupe_reconnects)

    @property
    def started(self) -> bool:
        return self._started

    def register(
        self,
        name: str,
        connection: ManagedConnection,
        resync: ResyncCallback | None = None,
    ) -> None:
        """
        Register a connection, optionally with a resync to run after reconnects.

        Re-registering a name replaces the entry, but handlers already bound to
        the previous connection object stay subscribed to it.
        """
        if name in self._connections:
            self._logger.warning(
                f"Connection already registered, replacing name={name}; "
                "handlers bound to the previous connection remain active"
            )
        self._connections[name] = ManagedConnectionEntry(
            name=name,
            connection=connection,
            resync=resync,
        )
        connection.on_unhealthy(lambda: self._handle_unhealthy(name, connection))
        connection.on_reconnected(lambda: self._handle_reconnected(name))

    async def start_all(self) -> None:
        """Start every registered connection in registration order."""
        if self._started:
            return
        self._started = True
        entries = list(self._connections.values())
        self._logger.info(
            f"Starting all managed connections count={len(entries)} "
            f"names={[entry.name for entry in entries]}"
        )
        for entry in entries:
            try:
                await entry.connection.start()
                self._logger.debug(f"Connection started name={entry.name}")
            except Exception as e:
                self._logger.error(f"Failed to start connection name={entry.name}: {e}")

    async def stop_all(self) -> None:
        """Stop every registered connection without reconnecting; entries stay registered."""
        if not self._started:
            return
        self._started = False
        for entry in list(self._connections.values()):
            try:
                await entry.connection.stop()
                self._logger.debug(f"Connection stopped name={entry.name}")
            except Exception as e:
                self._logger.warning(f"Error stopping connection name={entry.name}: {e}")

    def get_connection_state(self, name: str) -> HealthState | None:
        entry = self._connections.get(name)
        if entry is None:
            return None
        return entry.connection.get_health_state()

    def get_all_states(self) -> dict[str, HealthState]:
        return {
            name: entry.connection.get_health_state()
            for name, entry in self._connections.items()
        }

    def names(self) -> list[str]:
        return list(self._connections)

    async def wait_idle(self) -> None:
        """Wait for reconnect and resync work in flight at call time."""
        pending = list(self._inflight_tasks)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def _handle_unhealthy(self, name: str, connection: ManagedConnection) -> None:
        if self.dedupe_reconnects and connection in self._reconnecting:
            self._logger.debug(f"Reconnect already in flight, ignoring unhealthy event name={name}")
            return
        self._logger.info(f"Connection unhealthy, forcing reconnect name={name}")
        if self._spawn(self._force_reconnect(name, connection), name=name):
            self._reconnecting.add(connection)

    async def _force_reconnect(self, name: str, connection: ManagedConnection) -> None:
        try:
            await connection.force_reconnect()
        except Exception as e:
            self._logger.error(f"Force reconnect failed name={name}: {e}")
        finally:
            self._reconnecting.discard(connection)

    def _handle_reconnected(self, name: str) -> None:
        self._logger.info(f"Reconnected, resyncing state name={name}")
        self._spawn(self._resync(name), name=name)

    async def _resync(self, name: str) -> None:
        entry = self._connections.get(name)
        if entry is None or entry.resync is None:
            return
        try:
            result = entry.resync()
            if inspect.isawaitable(result):
                await result
            self._logger.info(f"Resync completed after reconnect name={name}")
        except Exception as e:
            self._logger.error(f"Resync after reconnect failed name={name}: {e}")

    def _spawn(self, coro: Coroutine[Any, Any, None], *, name: str) -> bool:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            self._logger.error(f"No running event loop, dropping connection event name={name}")
            return False
        task = loop.create_task(coro)
        self._inflight_tasks.add(task)
        task.add_done_callback(self._inflight_tasks.discard)
        return True
