"""Beacon API client for consensus-layer block, reward and validator data."""

from .exceptions import BeaconAPIError, BlockNotFoundError
from .types import BlockSummary, BlockReward, SyncCommitteeReward, Validator
from .client import BeaconClient

__all__ = [
    "BeaconClient",
    "BeaconAPIError",
    "BlockNotFoundError",
    "BlockSummary",
    "BlockReward",
    "SyncCommitteeReward",
    "Validator",
]
