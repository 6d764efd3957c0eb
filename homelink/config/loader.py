"""Configuration loading utilities."""

import json
import os
import re
from pathlib import Path
from typing import Any

from loguru import logger

from homelink.config.schema import Config

ADDON_OPTIONS_PATH = Path("/data/options.json")


def get_config_path() -> Path:
    """Get the configuration file path (`HOMELINK_CONFIG` overrides the default)."""
    env_path = str(os.environ.get("HOMELINK_CONFIG") or "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".homelink" / "config.json"


def is_addon_environment() -> bool:
    """Return True when running as a Home Assistant add-on."""
    return ADDON_OPTIONS_PATH.exists() or bool(os.environ.get("SUPERVISOR_TOKEN"))


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file, falling back to defaults.

    Environment variables (`HOMELINK_<SECTION>__<FIELD>`) fill any value the
    file does not set.
    """
    path = config_path or get_config_path()
    config: Config | None = None

    if path.exists():
        try:
            with path.open() as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError(f"{path} must be a JSON object")
            config = Config(**convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    if config is None:
        config = Config()
    if is_addon_environment():
        _apply_addon_environment(config)
    return config


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """Save configuration to file using camelCase keys."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = convert_to_camel(config.model_dump())
    with path.open("w") as f:
        json.dump(data, f, indent=2)
    return path


def validate_config(config: Config) -> None:
    """Raise ValueError listing every problem that would prevent connecting."""
    problems: list[str] = []
    token = config.home_assistant.access_token
    if config.addon:
        if not token:
            problems.append("SUPERVISOR_TOKEN not available; the add-on needs homeassistant_api: true")
    else:
        url = config.home_assistant.url
        if not url.startswith(("ws://", "wss://")):
            problems.append("homeAssistant.url must start with ws:// or wss://")
        if len(token) < 10:
            problems.append("homeAssistant.accessToken seems too short; provide a long-lived access token")
    if problems:
        raise ValueError("; ".join(problems))


def _apply_addon_environment(config: Config) -> None:
    config.addon = True
    if not config.home_assistant.access_token:
        config.home_assistant.access_token = (
            os.environ.get("SUPERVISOR_TOKEN") or os.environ.get("HA_ACCESS_TOKEN") or ""
        )


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case recursively."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase recursively."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)
