"""Configuration module for homelink."""

from homelink.config.loader import get_config_path, load_config, validate_config
from homelink.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path", "validate_config"]
