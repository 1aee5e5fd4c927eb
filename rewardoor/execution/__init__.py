"""JSON-RPC client for the execution layer."""

from .types import ExecutionAPIError, is_address
from .client import ExecutionClient

__all__ = [
    "ExecutionClient",
    "ExecutionAPIError",
    "is_address",
]
