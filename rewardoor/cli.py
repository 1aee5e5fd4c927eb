"""CLI entry point for rewardoor."""

import asyncio
import logging
import sys
from typing import Optional
from urllib.parse import urlsplit

import click

from .config import Config
from .service import DEFAULT_CACHE_SIZE


def setup_logging(level: str) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if level.upper() != "DEBUG":
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def redact_url(url: str) -> str:
    """Keep scheme and host only; node URLs often embed API tokens."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return "<unparsable url>"
    try:
        port = f":{parts.port}" if parts.port else ""
    except ValueError:
        return "<unparsable url>"
    return f"{parts.scheme}://{parts.hostname}{port}"


@click.group()
@click.version_option(package_name="rewardoor")
def cli():
    """Rewardoor - block reward and sync duty lookups for Ethereum slots."""
    pass


@cli.command()
@click.option(
    "--rpc-url",
    required=True,
    help="Base URL of the node serving the Beacon API (and execution JSON-RPC)",
    envvar="RPC_DIAL_URL",
)
@click.option(
    "--execution-rpc-url",
    help="Execution JSON-RPC URL, if different from --rpc-url",
    envvar="REWARDOOR_EXECUTION_RPC_URL",
)
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind the HTTP API",
    envvar="REWARDOOR_HOST",
)
@click.option(
    "--port",
    default=8080,
    type=int,
    help="Port for the HTTP API",
    envvar="REWARDOOR_PORT",
)
@click.option(
    "--metrics-port",
    default=8008,
    type=int,
    help="Port for Prometheus metrics (0 disables)",
    envvar="REWARDOOR_METRICS_PORT",
)
@click.option(
    "--cache-size",
    default=DEFAULT_CACHE_SIZE,
    type=click.IntRange(min=1),
    help="Slots kept per cache",
    envvar="REWARDOOR_CACHE_SIZE",
)
@click.option(
    "--request-timeout",
    default=10.0,
    type=click.FloatRange(min=0, min_open=True),
    help="Timeout in seconds for each upstream request",
    envvar="REWARDOOR_REQUEST_TIMEOUT",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
    envvar="REWARDOOR_LOG_LEVEL",
)
def run(
    rpc_url: str,
    execution_rpc_url: Optional[str],
    host: str,
    port: int,
    metrics_port: int,
    cache_size: int,
    request_timeout: float,
    log_level: str,
):
    """Run the HTTP API server."""
    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    from .app import run_app

    try:
        config = Config(
            rpc_url=rpc_url,
            execution_rpc_url=execution_rpc_url or "",
            listen_host=host,
            listen_port=port,
            metrics_port=metrics_port,
            cache_size=cache_size,
            request_timeout=request_timeout,
            log_level=log_level,
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    logger.info("Starting rewardoor")
    logger.info(f"  Beacon API: {redact_url(config.beacon_url)}")
    logger.info(f"  Execution API: {redact_url(config.execution_url)}")
    logger.info(f"  HTTP API: {host}:{port}")
    if metrics_port:
        logger.info(f"  Metrics: port {metrics_port}")
    logger.info(f"  Cache size: {cache_size} slots")
    logger.info(f"  Request timeout: {request_timeout}s")

    try:
        asyncio.run(run_app(config))
    except KeyboardInterrupt:
        logger.info("Shutting down")
        sys.exit(0)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
