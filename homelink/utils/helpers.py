"""Utility functions for homelink data paths and the persistent device ID."""

import os
import secrets
from pathlib import Path

DATA_DIR_NAME = ".homelink"
DEVICE_ID_PREFIX = "homelink-"
ADDON_DEVICE_ID_PATH = Path("/data/homelink-device-id")


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Get the runtime data directory (`HOMELINK_DATA_DIR` overrides `~/.homelink`)."""
    env_path = str(os.environ.get("HOMELINK_DATA_DIR") or "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / DATA_DIR_NAME


def get_device_id_path(addon: bool = False) -> Path:
    """Return where the device ID is persisted for the current run mode."""
    if addon:
        return ADDON_DEVICE_ID_PATH
    return get_data_path() / "device-id"


def normalize_device_id(value: str | None) -> str | None:
    """
    Normalize a configured device ID.

    Whitespace is stripped and the `homelink-` prefix added when missing.
    Empty input yields None; IDs are never invented here.
    """
    text = str(value or "").strip()
    if not text:
        return None
    if text.startswith(DEVICE_ID_PREFIX):
        return text
    return f"{DEVICE_ID_PREFIX}{text}"


def generate_device_id() -> str:
    return f"{DEVICE_ID_PREFIX}{secrets.token_hex(8)}"


def load_device_id(path: Path) -> str | None:
    if not path.exists():
        return None
    return normalize_device_id(path.read_text(encoding="utf-8"))


def save_device_id(path: Path, device_id: str) -> str:
    normalized = normalize_device_id(device_id)
    if normalized is None:
        raise ValueError("device ID must not be empty")
    ensure_dir(path.parent)
    path.write_text(normalized, encoding="utf-8")
    return normalized


def resolve_device_id(configured: str | None, path: Path | None = None) -> str | None:
    """Return the configured device ID, else the persisted one, else None."""
    normalized = normalize_device_id(configured)
    if normalized is not None:
        return normalized
    if path is None:
        return None
    return load_device_id(path)
