"""Typer CLI for the Cursor exporter: serve and scrape commands."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from cursor_exporter.config import DEFAULT_API_URL, ApiVariant, Config

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cursor-exporter",
    help="Prometheus exporter for Cursor Admin API metrics.",
    invoke_without_command=True,
)

ApiUrlOption = Annotated[
    str, typer.Option("--api-url", envvar="CURSOR_API_URL", help="Cursor API endpoint")
]
ApiTokenOption = Annotated[
    str | None,
    typer.Option(
        "--api-token",
        envvar="CURSOR_API_TOKEN",
        help="Cursor API token (required)",
        show_default=False,
    ),
]
ApiVariantOption = Annotated[
    ApiVariant,
    typer.Option("--api-variant", envvar="CURSOR_API_VARIANT", help="Admin API wire shape"),
]
MaxPagesOption = Annotated[
    int,
    typer.Option("--max-pages", envvar="CURSOR_MAX_PAGES", help="Upper bound on pages per call"),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", envvar="CURSOR_API_TIMEOUT", help="API request timeout in seconds"),
]
LogLevelOption = Annotated[
    str, typer.Option("--log-level", envvar="LOG_LEVEL", help="Logging level")
]


@app.callback(invoke_without_command=True)
def serve(
    ctx: typer.Context,
    api_url: ApiUrlOption = DEFAULT_API_URL,
    api_token: ApiTokenOption = None,
    api_variant: ApiVariantOption = ApiVariant.PAGINATED,
    listen_address: Annotated[
        str,
        typer.Option("--listen-address", envvar="LISTEN_ADDRESS", help="HTTP listen address"),
    ] = ":8080",
    metrics_path: Annotated[
        str, typer.Option("--metrics-path", envvar="METRICS_PATH", help="Metrics endpoint path")
    ] = "/metrics",
    log_level: LogLevelOption = "info",
    max_pages: MaxPagesOption = 100,
    timeout: TimeoutOption = 30.0,
) -> None:
    """Serve Cursor Admin API metrics over HTTP."""
    if ctx.invoked_subcommand is not None:
        return
    config = _build_config(
        api_url=api_url,
        api_token=api_token,
        api_variant=api_variant,
        listen_address=listen_address,
        metrics_path=metrics_path,
        log_level=log_level,
        max_pages=max_pages,
        timeout=timeout,
    )
    configure_logging(config.log_level)
    logger.info(
        "Starting Cursor Admin API Exporter (api_url=%s, variant=%s, listen=%s, "
        "metrics_path=%s, log_level=%s)",
        config.api_url,
        config.api_variant.value,
        config.listen_address,
        config.metrics_path,
        config.log_level,
    )

    import uvicorn

    from cursor_exporter.server import create_app
    from cursor_exporter.services.container import ServiceContainer

    container = ServiceContainer.create(config)
    web_app = create_app(
        container.registry,
        metrics_path=config.metrics_path,
        debug=logging.getLogger().isEnabledFor(logging.DEBUG),
    )
    uvicorn.run(web_app, host=config.host, port=config.port, log_level=_uvicorn_level(config))
    logger.info("Server stopped")


@app.command()
def scrape(
    api_url: ApiUrlOption = DEFAULT_API_URL,
    api_token: ApiTokenOption = None,
    api_variant: ApiVariantOption = ApiVariant.PAGINATED,
    log_level: LogLevelOption = "warning",
    max_pages: MaxPagesOption = 100,
    timeout: TimeoutOption = 30.0,
) -> None:
    """Run one collection and print the exposition text."""
    config = _build_config(
        api_url=api_url,
        api_token=api_token,
        api_variant=api_variant,
        log_level=log_level,
        max_pages=max_pages,
        timeout=timeout,
    )
    configure_logging(config.log_level)

    from prometheus_client import generate_latest

    from cursor_exporter.services.container import ServiceContainer

    container = ServiceContainer.create(config)
    typer.echo(generate_latest(container.registry).decode("utf-8"), nl=False)


def configure_logging(level_name: str) -> None:
    """Configure root logging; unknown level names fall back to INFO."""
    level = logging.getLevelNamesMapping().get(level_name.upper())
    logging.basicConfig(
        level=level if level is not None else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if level is None:
        logger.warning("Invalid log level %r, using info", level_name)


def _build_config(*, api_token: str | None, **options: object) -> Config:
    if not api_token:
        typer.echo("Error: CURSOR_API_TOKEN environment variable is required", err=True)
        raise typer.Exit(code=1)
    try:
        return Config(api_token=api_token, **options)  # type: ignore[arg-type]
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _uvicorn_level(config: Config) -> str:
    name = config.log_level.lower()
    if name in {"critical", "error", "warning", "info", "debug", "trace"}:
        return name
    return "info"
