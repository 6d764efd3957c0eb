"""Adapters exposing transport clients as managed connections."""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from homelink.connections.base import ManagedConnection
from homelink.connections.health import HealthState


class TransportConnection(ManagedConnection):
    """
    Map a transport client's lifecycle states onto health events.

    The wrapped client already implements heartbeat, timeout detection and
    `force_reconnect`. It must expose a `connection_state` string, async
    `connect` / `disconnect` / `force_reconnect`, and
    `on_connection_state_change(handler)`.
    """

    state_map: dict[str, HealthState] = {}
    error_state = "error"
    ready_state = "connected"

    def __init__(self, client: Any) -> None:
        super().__init__()
        self.client = client
        self._loop: asyncio.AbstractEventLoop | None = None
        self._last_state = self._normalize(getattr(client, "connection_state", ""))
        self._connected_once = self._last_state == self.ready_state
        client.on_connection_state_change(self._on_client_state)

    def get_health_state(self) -> HealthState:
        state = self._normalize(self.client.connection_state)
        return self.state_map.get(state, HealthState.OFFLINE)

    async def start(self) -> None:
        self._loop = asyncio.get_running_loop()
        await self.client.connect()

    async def stop(self) -> None:
        await self.client.disconnect()
        self._connected_once = False

    async def force_reconnect(self) -> None:
        await self.client.force_reconnect()

    def _on_client_state(self, state: Any) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            self._apply_state(state)
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._apply_state(state)
        else:
            loop.call_soon_threadsafe(self._apply_state, state)

    def _apply_state(self, state: Any) -> None:
        current = self._normalize(state)
        previous = self._last_state
        self._last_state = current
        if current == previous:
            return
        logger.debug(f"{self.name} transport state {previous or '-'} -> {current}")
        if current == self.error_state:
            self._emit_unhealthy()
        elif current == self.ready_state:
            if self._connected_once:
                self._emit_reconnected()
            self._connected_once = True

    @staticmethod
    def _normalize(state: Any) -> str:
        return str(state or "").strip().lower()


class HomeAssistantConnection(TransportConnection):
    """Home Assistant realtime websocket link."""

    name = "homeassistant"
    transport = "ws"
    state_map = {
        "connected": HealthState.CONNECTED,
        "connecting": HealthState.DEGRADED,
        "authenticating": HealthState.DEGRADED,
        "disconnected": HealthState.OFFLINE,
        "error": HealthState.OFFLINE,
    }


class CloudConnection(TransportConnection):
    """Cloud sync socket channel."""

    name = "cloud"
    transport = "socket"
    state_map = {
        "connected": HealthState.CONNECTED,
        "connecting": HealthState.DEGRADED,
        "disconnected": HealthState.OFFLINE,
        "error": HealthState.OFFLINE,
    }
