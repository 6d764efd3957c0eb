"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class AgentConfig(BaseModel):
    """Agent identity."""
    name: str = "homelink-agent"
    device_id: str = ""  # Optional fixed device ID; normalized with the homelink- prefix


class HomeAssistantConfig(BaseModel):
    """Home Assistant realtime websocket link."""
    url: str = "ws://supervisor/core/websocket"
    access_token: str = ""  # Long-lived access token (or SUPERVISOR_TOKEN in add-on mode)


class CloudConfig(BaseModel):
    """Cloud sync channel."""
    socket_url: str = ""
    api_key: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.socket_url and self.api_key)


class ReconnectionConfig(BaseModel):
    """Retry tuning for transport clients, reported by `config check`; the manager never schedules retries."""
    interval_ms: int = 5000
    max_attempts: int = 10


class ConnectionManagerConfig(BaseModel):
    """Connection manager policy."""
    dedupe_reconnects: bool = False  # Drop unhealthy events while a reconnect is in flight


class LoggingConfig(BaseModel):
    """Log output settings."""
    level: str = "INFO"
    serialize: bool = False  # JSON lines instead of human-readable output


class Config(BaseSettings):
    """Root configuration for homelink."""
    agent: AgentConfig = Field(default_factory=AgentConfig)
    home_assistant: HomeAssistantConfig = Field(default_factory=HomeAssistantConfig)
    cloud: CloudConfig = Field(default_factory=CloudConfig)
    reconnection: ReconnectionConfig = Field(default_factory=ReconnectionConfig)
    manager: ConnectionManagerConfig = Field(default_factory=ConnectionManagerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    addon: bool = False

    model_config = ConfigDict(
        env_prefix="HOMELINK_",
        env_nested_delimiter="__"
    )
