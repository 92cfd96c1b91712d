"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
    FeaturesSchema     → features.yaml
    SearchSchema       → search.yaml
    StorageSchema      → storage.yaml
    ClientSchema       → client.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    database: int
    external_api: int


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    driver: Literal["postgresql", "sqlite"]
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool
    create_tables: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    search_sync_enabled: bool


# =============================================================================
# search.yaml
# =============================================================================


class SearchNodeSchema(_StrictBase):
    protocol: str
    host: str
    port: int


class SearchRetrySchema(_StrictBase):
    attempts: int
    min_wait_seconds: float
    max_wait_seconds: float


class CircuitBreakerSchema(_StrictBase):
    fail_max: int
    timeout_duration: int


class SearchSchema(_StrictBase):
    node: SearchNodeSchema
    collection: str
    timeout_seconds: float
    retry: SearchRetrySchema
    circuit_breaker: CircuitBreakerSchema


# =============================================================================
# storage.yaml
# =============================================================================


class StorageSchema(_StrictBase):
    folder: str
    timeout_seconds: float


# =============================================================================
# client.yaml
# =============================================================================


class EdgeStyleSchema(_StrictBase):
    stroke: str
    stroke_width: float


class FallbackLayoutSchema(_StrictBase):
    x: float
    y: float
    step: float


class ClientSchema(_StrictBase):
    timeout_seconds: float
    default_edge_style: EdgeStyleSchema
    fallback_layout: FallbackLayoutSchema
