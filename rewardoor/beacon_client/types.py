"""Beacon API response types."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BlockSummary:
    """Signed beacon block as returned by /eth/v2/beacon/blocks."""

    slot: int
    proposer_index: int
    parent_root: str
    state_root: str
    fee_recipient: Optional[str]
    block_number: Optional[int]
    block_hash: Optional[str]
    version: str = ""
    execution_optimistic: bool = False
    finalized: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "BlockSummary":
        message = data["data"]["message"]
        # Pre-merge blocks have no execution payload
        payload = message["body"].get("execution_payload")
        return cls(
            slot=int(message["slot"]),
            proposer_index=int(message["proposer_index"]),
            parent_root=message["parent_root"],
            state_root=message["state_root"],
            fee_recipient=payload["fee_recipient"] if payload else None,
            block_number=int(payload["block_number"]) if payload else None,
            block_hash=payload["block_hash"] if payload else None,
            version=data.get("version", ""),
            execution_optimistic=data.get("execution_optimistic", False),
            finalized=data.get("finalized", False),
        )


@dataclass(frozen=True)
class BlockReward:
    """Proposer reward breakdown, amounts in gwei as decimal strings."""

    proposer_index: str
    total: str
    attestations: str
    sync_aggregate: str
    proposer_slashings: str
    attester_slashings: str

    @classmethod
    def from_dict(cls, data: dict) -> "BlockReward":
        reward = data["data"]
        return cls(
            proposer_index=str(reward["proposer_index"]),
            total=str(reward["total"]),
            attestations=str(reward.get("attestations", "0")),
            sync_aggregate=str(reward.get("sync_aggregate", "0")),
            proposer_slashings=str(reward.get("proposer_slashings", "0")),
            attester_slashings=str(reward.get("attester_slashings", "0")),
        )


@dataclass(frozen=True)
class SyncCommitteeReward:
    validator_index: str
    reward: str

    @classmethod
    def from_dict(cls, data: dict) -> "SyncCommitteeReward":
        return cls(
            validator_index=str(data["validator_index"]),
            reward=str(data["reward"]),
        )


@dataclass(frozen=True)
class Validator:
    """Validator record from /eth/v1/beacon/states/{state_id}/validators."""

    index: str
    balance: str
    status: str
    pubkey: str
    withdrawal_credentials: str
    effective_balance: str
    slashed: bool
    activation_eligibility_epoch: str
    activation_epoch: str
    exit_epoch: str
    withdrawable_epoch: str

    @classmethod
    def from_dict(cls, data: dict) -> "Validator":
        info = data["validator"]
        return cls(
            index=str(data["index"]),
            balance=str(data["balance"]),
            status=data["status"],
            pubkey=info["pubkey"],
            withdrawal_credentials=info.get("withdrawal_credentials", ""),
            effective_balance=str(info.get("effective_balance", "0")),
            slashed=bool(info.get("slashed", False)),
            activation_eligibility_epoch=str(info.get("activation_eligibility_epoch", "")),
            activation_epoch=str(info.get("activation_epoch", "")),
            exit_epoch=str(info.get("exit_epoch", "")),
            withdrawable_epoch=str(info.get("withdrawable_epoch", "")),
        )
