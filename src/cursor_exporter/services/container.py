"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry

from cursor_exporter.config import ApiVariant
from cursor_exporter.data.legacy import LegacyCursorClient
from cursor_exporter.data.paginated import PaginatedCursorClient
from cursor_exporter.data.transport import CursorTransport
from cursor_exporter.services.exporter import CursorExporter

if TYPE_CHECKING:
    import httpx

    from cursor_exporter.config import Config
    from cursor_exporter.data.protocols import UsageDataSource


@dataclass
class ServiceContainer:
    """Holds the client, exporter and registry. Built once at startup."""

    config: Config
    client: UsageDataSource
    exporter: CursorExporter
    registry: CollectorRegistry

    @classmethod
    def create(
        cls, config: Config, *, transport: httpx.BaseTransport | None = None
    ) -> ServiceContainer:
        """Factory that wires all dependencies."""
        client = create_client(config, transport=transport)
        exporter = CursorExporter(client, config.metric_namespace)
        registry = CollectorRegistry()
        registry.register(exporter)
        return cls(config=config, client=client, exporter=exporter, registry=registry)


def create_client(
    config: Config, *, transport: httpx.BaseTransport | None = None
) -> UsageDataSource:
    """Pick the API client for the configured wire variant."""
    api = CursorTransport(
        config.base_url, config.api_token, timeout=config.timeout, transport=transport
    )
    match config.api_variant:
        case ApiVariant.LEGACY:
            return LegacyCursorClient(api, max_pages=config.max_pages)
        case _:
            return PaginatedCursorClient(api, max_pages=config.max_pages)
