from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from persondb.core.exceptions import ConfigurationException

CONNECTORS = ("sqlite", "postgres")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings using Pydantic Settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PERSONDB_",
        case_sensitive=False,
        extra="ignore",
    )

    # Database settings
    dsn: str = Field(default="", description="Datasource name")
    db: str = Field(default="sqlite", description="Database connector (sqlite/postgres)")
    connect_attempts: int = Field(default=3, description="Connection attempts for networked backends")
    connect_backoff: float = Field(default=5.0, description="First retry wait in seconds, doubled per attempt")

    # HTTP settings
    addr: str = Field(default=":8080", description="Bind address")

    # Deployment region, read from this variable on every request
    region_env_var: str = Field(default="FLY_REGION", description="Region environment variable")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    def validate_required(self) -> None:
        """Raise ConfigurationException when a required value is missing or invalid"""
        if not self.dsn:
            raise ConfigurationException("dsn required")
        if not self.addr:
            raise ConfigurationException("bind address required")
        if not self.db:
            raise ConfigurationException("database connector required")
        if self.db not in CONNECTORS:
            raise ConfigurationException(
                f"unknown database connector: {self.db}",
                detail=f"expected one of {', '.join(CONNECTORS)}",
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationException(
                f"unknown log level: {self.log_level}",
                detail=f"expected one of {', '.join(LOG_LEVELS)}",
            )


def parse_bind_address(addr: str) -> Tuple[str, int]:
    """Split a ``host:port`` bind address; an empty host binds every interface.

    >>> parse_bind_address(":8080")
    ('0.0.0.0', 8080)
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigurationException(f"invalid bind address: {addr!r}")
    port_number = int(port)
    if not 0 <= port_number <= 65535:
        raise ConfigurationException(f"invalid bind address: {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, port_number
