"""Managed connections and the manager that keeps them healthy."""

from homelink.connections.base import ManagedConnection
from homelink.connections.health import HealthState
from homelink.connections.manager import ConnectionManager, ManagedConnectionEntry
from homelink.connections.mock import MockConnection
from homelink.connections.transport import (
    CloudConnection,
    HomeAssistantConnection,
    TransportConnection,
)

__all__ = [
    "HealthState",
    "ManagedConnection",
    "ConnectionManager",
    "ManagedConnectionEntry",
    "MockConnection",
    "TransportConnection",
    "HomeAssistantConnection",
    "CloudConnection",
]
