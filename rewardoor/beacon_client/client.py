"""Beacon API client for block, reward and validator lookups."""

import asyncio
import json
import logging
import time
from typing import Optional, Any, Union

import aiohttp

from .exceptions import BeaconAPIError, BlockNotFoundError
from .types import BlockSummary, BlockReward, SyncCommitteeReward, Validator
from ..exceptions import UpstreamUnavailableError, UpstreamDecodeError
from .. import metrics

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class BeaconClient:
    """Client for a remote Beacon API (any conformant client).

    API reference: https://ethereum.github.io/beacon-APIs/
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _request(
        self,
        method: str,
        endpoint: str,
        path: str,
        body: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            endpoint: Short endpoint name used as a metrics label
            path: Request path relative to the base URL
            body: Optional JSON body
        """
        session = await self._ensure_session()
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"

        logger.debug(f"Beacon API call: {method} {path}")

        start_time = time.time()
        error_type = None

        try:
            async with session.request(
                method,
                url,
                json=body,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status == 404:
                    error_type = "not_found"
                    text = await response.text(errors="replace")
                    raise BlockNotFoundError(f"{path}: {text}")
                if response.status != 200:
                    error_type = str(response.status)
                    text = await response.text(errors="replace")
                    raise BeaconAPIError(response.status, text)
                return await response.json()
        except (aiohttp.ContentTypeError, json.JSONDecodeError, UnicodeDecodeError) as e:
            error_type = "decode_error"
            raise UpstreamDecodeError(f"Invalid JSON from {path}: {e}") from e
        except asyncio.TimeoutError as e:
            error_type = "timeout"
            raise UpstreamUnavailableError(
                f"Beacon API request timed out after {self.timeout}s: {path}"
            ) from e
        except aiohttp.ClientError as e:
            error_type = "connection_error"
            logger.error(f"Beacon API connection error: {e}")
            raise UpstreamUnavailableError(f"Beacon API connection error: {e}") from e
        finally:
            latency = time.time() - start_time
            metrics.record_upstream_call("beacon", endpoint, latency, error_type)

    @staticmethod
    def _decode(path: str, decoder, payload: Any):
        try:
            return decoder(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise UpstreamDecodeError(f"Unexpected response shape from {path}: {e!r}") from e

    async def get_block_info(self, block_id: Union[str, int]) -> BlockSummary:
        """Fetch a block summary by slot number or tag ("head", "finalized", ...)."""
        path = f"/eth/v2/beacon/blocks/{block_id}"
        data = await self._request("GET", "blocks", path)
        return self._decode(path, BlockSummary.from_dict, data)

    async def get_block_reward_info(self, slot: int) -> BlockReward:
        """Fetch the proposer reward breakdown for the block at a slot."""
        path = f"/eth/v1/beacon/rewards/blocks/{slot}"
        data = await self._request("GET", "block_rewards", path)
        return self._decode(path, BlockReward.from_dict, data)

    async def get_sync_committee_rewards(self, slot: int) -> list[SyncCommitteeReward]:
        """Fetch sync committee rewards for every committee member at a slot."""
        path = f"/eth/v1/beacon/rewards/sync_committee/{slot}"
        data = await self._request("POST", "sync_committee_rewards", path, body=[])
        return self._decode(
            path,
            lambda d: [SyncCommitteeReward.from_dict(item) for item in d["data"]],
            data,
        )

    async def get_validators_by_status(
        self,
        slot: int,
        ids: list[str],
        statuses: list[str],
    ) -> list[Validator]:
        """Fetch validators at a slot's state, filtered by ids and statuses."""
        path = f"/eth/v1/beacon/states/{slot}/validators"
        payload = {"ids": ids, "statuses": statuses}
        data = await self._request("POST", "validators", path, body=payload)
        return self._decode(
            path,
            lambda d: [Validator.from_dict(item) for item in d["data"]],
            data,
        )

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
