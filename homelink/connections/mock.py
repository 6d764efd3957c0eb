"""In-memory connection used for local simulation and tests."""

from __future__ import annotations

from homelink.connections.base import ManagedConnection
from homelink.connections.health import HealthState


class MockConnection(ManagedConnection):
    """Connection whose lifecycle and health events are driven by the caller."""

    transport = "in-memory"

    def __init__(
        self,
        name: str = "mock",
        *,
        state: HealthState = HealthState.OFFLINE,
        fail_start: bool = False,
        fail_stop: bool = False,
        fail_reconnect: bool = False,
        fail_resync: bool = False,
    ) -> None:
        super().__init__()
        self.name = name
        self.state = state
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.fail_reconnect = fail_reconnect
        self.fail_resync = fail_resync
        self.start_calls = 0
        self.stop_calls = 0
        self.force_reconnect_calls = 0
        self.resync_calls = 0

    def get_health_state(self) -> HealthState:
        return self.state

    async def start(self) -> None:
        self.start_calls += 1
        if self.fail_start:
            self.state = HealthState.OFFLINE
            raise ConnectionError(f"{self.name} start failed")
        self.state = HealthState.CONNECTED

    async def stop(self) -> None:
        self.stop_calls += 1
        if self.fail_stop:
            raise ConnectionError(f"{self.name} stop failed")
        self.state = HealthState.OFFLINE

    async def force_reconnect(self) -> None:
        self.force_reconnect_calls += 1
        if self.fail_reconnect:
            self.state = HealthState.OFFLINE
            raise ConnectionError(f"{self.name} reconnect failed")
        self.state = HealthState.CONNECTED

    async def resync(self) -> None:
        """Resync procedure to register alongside this connection."""
        self.resync_calls += 1
        if self.fail_resync:
            raise RuntimeError(f"{self.name} resync failed")

    def set_state(self, state: HealthState) -> None:
        self.state = state

    def trigger_unhealthy(self) -> None:
        """Report the connection as failed to every subscriber."""
        self.state = HealthState.OFFLINE
        self._emit_unhealthy()

    def trigger_reconnected(self) -> None:
        """Report the connection as operative again to every subscriber."""
        self.state = HealthState.CONNECTED
        self._emit_reconnected()
