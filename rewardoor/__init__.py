"""Rewardoor - block reward and sync duty lookups for Ethereum slots."""

from .exceptions import (
    RewardoorError,
    UpstreamError,
    UpstreamUnavailableError,
    UpstreamDecodeError,
    SlotNotFoundError,
    FutureSlotError,
    InvalidSlotError,
)

__all__ = [
    "RewardoorError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "UpstreamDecodeError",
    "SlotNotFoundError",
    "FutureSlotError",
    "InvalidSlotError",
]
