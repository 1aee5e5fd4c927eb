"""Prometheus metrics for rewardoor."""

import logging
import threading
from typing import Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)

logger = logging.getLogger(__name__)

DEFAULT_METRICS_PORT = 8008

service_info = Info(
    "rewardoor_service",
    "Service information",
)

head_slot = Gauge(
    "rewardoor_head_slot",
    "Last observed head slot",
)

# HTTP API metrics
api_requests = Counter(
    "rewardoor_api_requests_total",
    "Total API requests",
    ["endpoint", "status"],
)

# Upstream metrics
upstream_requests = Counter(
    "rewardoor_upstream_requests_total",
    "Total upstream requests",
    ["upstream", "method"],
)

upstream_errors = Counter(
    "rewardoor_upstream_errors_total",
    "Total upstream errors",
    ["upstream", "method", "error_type"],
)

upstream_latency = Histogram(
    "rewardoor_upstream_latency_seconds",
    "Upstream request latency",
    ["upstream", "method"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Cache metrics
cache_hits = Counter(
    "rewardoor_cache_hits_total",
    "Total cache hits",
    ["cache"],
)

cache_misses = Counter(
    "rewardoor_cache_misses_total",
    "Total cache misses",
    ["cache"],
)

cache_size = Gauge(
    "rewardoor_cache_entries",
    "Number of entries in cache",
    ["cache"],
)


_server_started = False
_server_lock = threading.Lock()


def start_metrics_server(port: int = DEFAULT_METRICS_PORT) -> bool:
    """Start the Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default 8008)

    Returns:
        True if server started successfully, False if already running
    """
    global _server_started

    with _server_lock:
        if _server_started:
            logger.warning("Metrics server already running")
            return False

        try:
            start_http_server(port)
            _server_started = True
            logger.info(f"Prometheus metrics server started on port {port}")
            return True
        except OSError as e:
            logger.error(f"Failed to start metrics server: {e}")
            return False


def set_service_info(version: str) -> None:
    service_info.info({"version": version})


def update_head_slot(slot: int) -> None:
    head_slot.set(slot)


def record_api_request(endpoint: str, status: int) -> None:
    """Record an API request and its response status."""
    api_requests.labels(endpoint=endpoint, status=str(status)).inc()


def record_upstream_call(
    upstream: str,
    method: str,
    latency: float,
    error: Optional[str] = None,
) -> None:
    """Record an upstream call.

    Args:
        upstream: 'beacon' or 'execution'
        method: Endpoint or JSON-RPC method name
        latency: Request latency in seconds
        error: Error type if the call failed, None if successful
    """
    upstream_requests.labels(upstream=upstream, method=method).inc()
    upstream_latency.labels(upstream=upstream, method=method).observe(latency)
    if error:
        upstream_errors.labels(upstream=upstream, method=method, error_type=error).inc()


def record_cache_hit(cache: str) -> None:
    cache_hits.labels(cache=cache).inc()


def record_cache_miss(cache: str) -> None:
    cache_misses.labels(cache=cache).inc()


def update_cache_size(cache: str, size: int) -> None:
    cache_size.labels(cache=cache).set(size)
