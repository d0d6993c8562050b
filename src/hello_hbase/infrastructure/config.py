"""Configuration management for the HBase walkthrough."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GREETINGS: tuple[str, ...] = (
    "Hello World!",
    "Hello Cloud Bigtable!",
    "Hello HBase!",
    "Hi there",
    "Cz!",
)


class ServiceConfig(BaseModel):
    """Database service endpoint configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="10.0.0.10", min_length=1, description="Thrift gateway / quorum host")
    port: int = Field(default=9090, ge=1, le=65535, description="Thrift gateway port")
    namespace_path: str = Field(
        default="/hbase-unsecure", description="Root znode the cluster registers under"
    )
    timeout_ms: int | None = Field(
        default=None, ge=1, description="Socket timeout in milliseconds (None waits forever)"
    )
    transport: Literal["buffered", "framed"] = Field(
        default="buffered", description="Thrift transport"
    )
    protocol: Literal["binary", "compact"] = Field(default="binary", description="Thrift protocol")
    compat: Literal["0.90", "0.92", "0.94", "0.96", "0.98"] = Field(
        default="0.98", description="HBase Thrift API compatibility level"
    )

    @field_validator("namespace_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"namespace_path must be absolute, got {value!r}")
        return value


class ClientConfig(BaseModel):
    """Client retry configuration, handed to the connection factory."""

    model_config = ConfigDict(frozen=True)

    retries_number: int = Field(default=3, ge=1, le=100, description="Connection attempts")
    pause_ms: int = Field(default=1000, ge=0, description="Pause between attempts in milliseconds")


class TableConfig(BaseModel):
    """Schema and data written by the walkthrough."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="Hello-Bigtable", min_length=1, description="Table name")
    column_families: tuple[str, ...] = Field(
        default=("cf1", "cf2"), min_length=1, description="Column families to create"
    )
    column_qualifier: str = Field(default="greeting", min_length=1, description="Column written in each family")
    row_key_prefix: str = Field(default="greeting", min_length=1, description="Row key prefix")
    greetings: tuple[str, ...] = Field(
        default=DEFAULT_GREETINGS, min_length=1, description="Values written, one row each"
    )
    drop_on_success: bool = Field(
        default=False, description="Disable and delete the table after a successful run"
    )

    @field_validator("column_families")
    @classmethod
    def _unique_families(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(value)) != len(value):
            raise ValueError(f"column_families must be unique, got {list(value)}")
        return value


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    model_config = ConfigDict(frozen=True)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus exporter port (disabled if None)"
    )
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="hello_hbase", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the walkthrough."""

    model_config = SettingsConfigDict(
        env_prefix="HELLO_HBASE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    backend: Literal["thrift", "memory"] = Field(
        default="thrift", description="Column store backend"
    )
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    table: TableConfig = Field(default_factory=TableConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def as_properties(self) -> dict[str, str]:
        """Render the connection settings as HBase client properties."""
        return {
            "hbase.zookeeper.quorum": self.service.host,
            "hbase.zookeeper.property.clientPort": str(self.service.port),
            "hbase.client.retries.number": str(self.client.retries_number),
            "hbase.client.pause": str(self.client.pause_ms),
            "zookeeper.znode.parent": self.service.namespace_path,
        }


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
