"""Aggregation service answering slot-scoped reward and duty queries."""

from .cache import LRUCache, InFlight, DEFAULT_CACHE_SIZE
from .ethereum import EthereumService, Reward, RewardStatus, classify_fee_recipient

__all__ = [
    "EthereumService",
    "Reward",
    "RewardStatus",
    "classify_fee_recipient",
    "LRUCache",
    "InFlight",
    "DEFAULT_CACHE_SIZE",
]
