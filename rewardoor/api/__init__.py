"""HTTP API server."""

from .server import RewardAPI, parse_slot

__all__ = [
    "RewardAPI",
    "parse_slot",
]
