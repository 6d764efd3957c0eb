"""Health levels reported by managed connections."""

from __future__ import annotations

from enum import StrEnum


class HealthState(StrEnum):
    """Point-in-time operability of one managed connection."""

    CONNECTED = "CONNECTED"  # fully operative
    DEGRADED = "DEGRADED"  # connecting/authenticating or minor faults
    OFFLINE = "OFFLINE"  # disconnected or in error
