"""Application configuration models with Pydantic validation."""

from pydantic import BaseModel, Field


class LogStoreConfig(BaseModel):
    """Log store configuration.

    Both backends share one retention bound so behavior does not change
    with the deployment shape.
    """

    backend: str = Field(
        default="memory",
        pattern="^(memory|file)$",
        description="Storage backend: process memory or a JSON file",
    )
    capacity: int = Field(
        default=1000,
        ge=1,
        le=100000,
        description="Maximum entries kept before the oldest are evicted",
    )
    file_path: str = Field(
        default="data/logs.json",
        description="JSON file used by the file backend",
    )
    seed_on_start: bool = Field(
        default=False,
        description="Insert an initialization entry when the store starts empty",
    )


class EventsConfig(BaseModel):
    """Server-Sent Events configuration."""

    buffer_size: int = Field(
        default=100,
        ge=0,
        le=1000,
        description="Recent events replayed to newly connected SSE clients",
    )
    keepalive_interval: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Seconds without events before a keep-alive comment is sent",
    )


class AppConfig(BaseModel):
    """Root application configuration.

    Loaded from config.yaml and validated with Pydantic.
    """

    host: str = Field(
        default="0.0.0.0",
        description="Interface the Flask server binds to",
    )
    port: int = Field(
        default=5050,
        ge=1024,
        le=65535,
        description="Port for the Flask server",
    )
    debug: bool = Field(
        default=False,
        description="Enable Flask debug mode",
    )
    log_store: LogStoreConfig = Field(
        default_factory=LogStoreConfig,
        description="Log store backend and retention",
    )
    events: EventsConfig = Field(
        default_factory=EventsConfig,
        description="Live update stream settings",
    )
