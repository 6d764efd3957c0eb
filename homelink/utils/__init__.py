"""Utility functions for homelink."""

from homelink.utils.helpers import (
    get_data_path,
    get_device_id_path,
    normalize_device_id,
    resolve_device_id,
)

__all__ = [
    "get_data_path",
    "get_device_id_path",
    "normalize_device_id",
    "resolve_device_id",
]
