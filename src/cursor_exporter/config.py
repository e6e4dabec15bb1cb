"""Configuration for the Cursor exporter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

DEFAULT_API_URL = "https://api.cursor.com"


class ApiVariant(StrEnum):
    """Wire shape spoken by the upstream Admin API."""

    PAGINATED = "paginated"
    LEGACY = "legacy"


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    api_token: str
    api_url: str = DEFAULT_API_URL
    api_variant: ApiVariant = ApiVariant.PAGINATED
    listen_address: str = ":8080"
    metrics_path: str = "/metrics"
    log_level: str = "info"
    max_pages: int = 100
    timeout: float = 30.0
    metric_namespace: str = "cursor"

    def __post_init__(self) -> None:
        if not self.api_token:
            raise ValueError("api_token is required")
        # Accept plain strings from the CLI/env and normalize to the enum.
        try:
            object.__setattr__(self, "api_variant", ApiVariant(str(self.api_variant).lower()))
        except ValueError:
            valid = [variant.value for variant in ApiVariant]
            raise ValueError(f"api_variant must be one of: {valid}") from None
        if not self.metrics_path.startswith("/"):
            raise ValueError("metrics_path must start with '/'")
        if self.max_pages <= 0:
            raise ValueError("max_pages must be > 0")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        _, sep, port = self.listen_address.rpartition(":")
        if not sep or not port.isdigit():
            raise ValueError("listen_address must look like 'host:port' or ':port'")

    @property
    def host(self) -> str:
        host = self.listen_address.rsplit(":", 1)[0].strip("[]")
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        return int(self.listen_address.rsplit(":", 1)[1])

    @property
    def base_url(self) -> str:
        return self.api_url.rstrip("/")
