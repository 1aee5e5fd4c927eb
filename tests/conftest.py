"""Shared fixtures: in-memory beacon and execution clients."""

import asyncio
from collections import Counter
from typing import Optional

import pytest

from rewardoor.beacon_client import (
    BlockNotFoundError,
    BlockReward,
    BlockSummary,
    SyncCommitteeReward,
    Validator,
)
from rewardoor.service import EthereumService

CONTRACT_ADDRESS = "0x" + "ab" * 20
ACCOUNT_ADDRESS = "0x" + "cd" * 20


def make_block(slot: int, fee_recipient: Optional[str] = ACCOUNT_ADDRESS) -> BlockSummary:
    return BlockSummary(
        slot=slot,
        proposer_index=slot % 1000,
        parent_root="0x" + "11" * 32,
        state_root="0x" + "22" * 32,
        fee_recipient=fee_recipient,
        block_number=slot + 1 if fee_recipient else None,
        block_hash="0x" + "33" * 32 if fee_recipient else None,
        version="deneb",
    )


def make_block_reward(total: str) -> BlockReward:
    return BlockReward(
        proposer_index="1",
        total=total,
        attestations="0",
        sync_aggregate="0",
        proposer_slashings="0",
        attester_slashings="0",
    )


def make_validator(index: int, status: str = "active_ongoing") -> Validator:
    return Validator(
        index=str(index),
        balance="32000000000",
        status=status,
        pubkey=pubkey_for(index),
        withdrawal_credentials="0x" + "00" * 32,
        effective_balance="32000000000",
        slashed=False,
        activation_eligibility_epoch="0",
        activation_epoch="0",
        exit_epoch="18446744073709551615",
        withdrawable_epoch="18446744073709551615",
    )


def pubkey_for(index: int) -> str:
    return "0x" + f"{index:02x}" * 48


class FakeBeaconClient:
    """Beacon client backed by dictionaries, counting every call."""

    def __init__(self):
        self.head_slot = 0
        self.blocks: dict[int, BlockSummary] = {}
        self.block_rewards: dict[int, BlockReward] = {}
        self.sync_rewards: dict[int, list[SyncCommitteeReward]] = {}
        self.validators: dict[str, Validator] = {}
        self.calls: Counter = Counter()
        self.validator_queries: list[tuple[int, list[str], list[str]]] = []
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None

    def add_slot(
        self,
        slot: int,
        total: str = "0",
        fee_recipient: Optional[str] = ACCOUNT_ADDRESS,
        committee: tuple[int, ...] = (),
    ) -> None:
        self.blocks[slot] = make_block(slot, fee_recipient)
        self.block_rewards[slot] = make_block_reward(total)
        self.sync_rewards[slot] = [
            SyncCommitteeReward(validator_index=str(i), reward="100") for i in committee
        ]
        self.head_slot = max(self.head_slot, slot)

    async def _enter(self, name: str) -> None:
        self.calls[name] += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error

    async def get_block_info(self, block_id) -> BlockSummary:
        await self._enter("get_block_info")
        if block_id == "head":
            return make_block(self.head_slot)
        if block_id not in self.blocks:
            raise BlockNotFoundError(f"Block not found: {block_id}")
        return self.blocks[block_id]

    async def get_block_reward_info(self, slot: int) -> BlockReward:
        await self._enter("get_block_reward_info")
        if slot not in self.block_rewards:
            raise BlockNotFoundError(f"Block not found: {slot}")
        return self.block_rewards[slot]

    async def get_sync_committee_rewards(self, slot: int) -> list[SyncCommitteeReward]:
        await self._enter("get_sync_committee_rewards")
        return list(self.sync_rewards.get(slot, []))

    async def get_validators_by_status(self, slot, ids, statuses) -> list[Validator]:
        await self._enter("get_validators_by_status")
        self.validator_queries.append((slot, list(ids), list(statuses)))
        # Beacon nodes answer in validator index order
        matches = [
            v for v in self.validators.values()
            if v.index in ids and v.status in statuses
        ]
        return sorted(matches, key=lambda v: int(v.index))

    async def close(self) -> None:
        pass


class FakeExecutionClient:
    """Execution client returning configured code per address."""

    def __init__(self):
        self.code: dict[str, bytes] = {CONTRACT_ADDRESS: bytes.fromhex("6080604052")}
        self.calls: list[tuple[str, object]] = []
        self.error: Optional[Exception] = None

    async def get_code(self, address: str, block="latest") -> bytes:
        self.calls.append((address, block))
        if self.error is not None:
            raise self.error
        return self.code.get(address, b"")

    async def close(self) -> None:
        pass


@pytest.fixture
def beacon():
    return FakeBeaconClient()


@pytest.fixture
def execution():
    return FakeExecutionClient()


@pytest.fixture
def service(beacon, execution):
    return EthereumService(beacon, execution)
