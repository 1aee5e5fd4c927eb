"""Configuration for the rewardoor service."""

from dataclasses import dataclass
from urllib.parse import urlsplit

from .service import DEFAULT_CACHE_SIZE


@dataclass
class Config:
    """Service configuration."""

    rpc_url: str
    execution_rpc_url: str = ""
    listen_host: str = "0.0.0.0"
    listen_port: int = 8080
    metrics_port: int = 8008
    cache_size: int = DEFAULT_CACHE_SIZE
    request_timeout: float = 10.0
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.rpc_url:
            raise ValueError("rpc_url is required")
        if self.cache_size <= 0:
            raise ValueError(f"cache_size must be positive, got {self.cache_size}")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")
        for url in (self.rpc_url, self.execution_rpc_url):
            if url:
                _check_url(url)

    @property
    def beacon_url(self) -> str:
        return self.rpc_url

    @property
    def execution_url(self) -> str:
        """Execution JSON-RPC endpoint; the beacon URL unless set separately."""
        return self.execution_rpc_url or self.rpc_url


def _check_url(url: str):
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ValueError(f"not an http(s) URL: {url!r}")
    try:
        parts.port
    except ValueError:
        raise ValueError(f"invalid port in URL: {url!r}") from None
