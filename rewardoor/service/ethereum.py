"""Slot-scoped queries combining the beacon and execution clients."""

import logging
from dataclasses import dataclass
from enum import Enum

from .cache import LRUCache, InFlight, DEFAULT_CACHE_SIZE
from ..beacon_client import BeaconClient, BlockNotFoundError, BlockSummary
from ..execution import ExecutionClient
from ..exceptions import SlotNotFoundError, UpstreamDecodeError
from .. import metrics

logger = logging.getLogger(__name__)

HEAD = "head"
ACTIVE_ONGOING = "active_ongoing"


class RewardStatus(str, Enum):
    MEV = "MEV"
    VANILLA = "Vanilla"


@dataclass(frozen=True)
class Reward:
    """Fee recipient classification and total block reward (gwei, decimal string)."""

    status: RewardStatus
    reward: str


def classify_fee_recipient(code: bytes) -> RewardStatus:
    """Classify a block by the code deployed at its fee recipient.

    An account without code is reported as MEV, a contract as Vanilla.
    """
    return RewardStatus.MEV if len(code) == 0 else RewardStatus.VANILLA


class EthereumService:
    """Answers block reward and sync duty queries for a slot.

    Results are memoized per slot in two independent LRU caches. Concurrent
    misses for the same slot share a single upstream round-trip. Callers are
    expected to reject slots ahead of get_current_slot() before asking.
    """

    def __init__(
        self,
        beacon_client: BeaconClient,
        execution_client: ExecutionClient,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        self.beacon_client = beacon_client
        self.execution_client = execution_client
        self.reward_cache: LRUCache[int, Reward] = LRUCache(cache_size, name="block_reward")
        self.duties_cache: LRUCache[int, tuple[str, ...]] = LRUCache(cache_size, name="sync_duties")
        self._reward_flights: InFlight[int, Reward] = InFlight()
        self._duties_flights: InFlight[int, tuple[str, ...]] = InFlight()

    async def get_current_slot(self) -> int:
        """Slot of the current head block. Never cached."""
        block = await self.beacon_client.get_block_info(HEAD)
        metrics.update_head_slot(block.slot)
        return block.slot

    async def get_block_reward(self, slot: int) -> Reward:
        reward = self.reward_cache.get(slot)
        if reward is not None:
            logger.debug(f"Block reward cache hit for slot {slot}")
            return reward
        return await self._reward_flights.run(slot, lambda: self._fetch_block_reward(slot))

    async def get_sync_duties(self, slot: int) -> tuple[str, ...]:
        duties = self.duties_cache.get(slot)
        if duties is not None:
            logger.debug(f"Sync duties cache hit for slot {slot}")
            return duties
        return await self._duties_flights.run(slot, lambda: self._fetch_sync_duties(slot))

    async def _get_block(self, slot: int) -> BlockSummary:
        try:
            return await self.beacon_client.get_block_info(slot)
        except BlockNotFoundError as e:
            raise SlotNotFoundError(slot) from e

    async def _fetch_block_reward(self, slot: int) -> Reward:
        block = await self._get_block(slot)
        try:
            block_reward = await self.beacon_client.get_block_reward_info(slot)
        except BlockNotFoundError as e:
            raise SlotNotFoundError(slot) from e

        fee_recipient = block.fee_recipient
        if fee_recipient is None:
            raise UpstreamDecodeError(f"Block at slot {slot} has no execution payload")

        code = await self.execution_client.get_code(fee_recipient, "latest")
        reward = Reward(status=classify_fee_recipient(code), reward=block_reward.total)

        logger.debug(
            f"Slot {slot}: fee_recipient={fee_recipient}, code_len={len(code)}, "
            f"status={reward.status.value}, total={reward.reward}"
        )
        self.reward_cache.add(slot, reward)
        return reward

    async def _fetch_sync_duties(self, slot: int) -> tuple[str, ...]:
        await self._get_block(slot)
        try:
            rewards = await self.beacon_client.get_sync_committee_rewards(slot)
        except BlockNotFoundError as e:
            raise SlotNotFoundError(slot) from e

        indices = [r.validator_index for r in rewards]
        if indices:
            validators = await self.beacon_client.get_validators_by_status(
                slot, indices, [ACTIVE_ONGOING]
            )
        else:
            validators = []

        duties = tuple(v.pubkey for v in validators)
        logger.debug(
            f"Slot {slot}: {len(indices)} sync committee rewards, {len(duties)} active validators"
        )
        self.duties_cache.add(slot, duties)
        return duties
