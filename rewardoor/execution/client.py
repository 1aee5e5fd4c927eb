"""JSON-RPC client for execution layer state queries."""

import asyncio
import json
import logging
import time
from typing import Optional, Any, Union

import aiohttp

from .types import ExecutionAPIError, is_address, to_block_param
from ..exceptions import UpstreamUnavailableError, UpstreamDecodeError
from .. import metrics

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ExecutionClient:
    """Client for the Ethereum execution JSON-RPC API."""

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT):
        self.url = url
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None
        self._request_id = 0

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _call(self, method: str, params: list) -> Any:
        """Make a JSON-RPC call."""
        session = await self._ensure_session()
        self._request_id += 1

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        logger.debug(f"Execution API call: {method} {params}")

        start_time = time.time()
        error_type = None

        try:
            async with session.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    error_type = str(response.status)
                    text = await response.text(errors="replace")
                    raise ExecutionAPIError(response.status, text)

                data = await response.json()
                if not isinstance(data, dict):
                    error_type = "decode_error"
                    raise UpstreamDecodeError(f"{method}: response is not a JSON object")

                # Some nodes send "error": null next to a valid result
                error = data.get("error")
                if isinstance(error, dict):
                    error_type = str(error.get("code", "unknown"))
                    raise ExecutionAPIError(error.get("code", -1), error.get("message", ""))
                if error is not None:
                    error_type = "decode_error"
                    raise UpstreamDecodeError(f"{method}: malformed error member {error!r}")

                if "result" not in data:
                    error_type = "decode_error"
                    raise UpstreamDecodeError(f"{method}: response has no result")
                return data["result"]
        except (aiohttp.ContentTypeError, json.JSONDecodeError, UnicodeDecodeError) as e:
            error_type = "decode_error"
            raise UpstreamDecodeError(f"Invalid JSON from {method}: {e}") from e
        except asyncio.TimeoutError as e:
            error_type = "timeout"
            raise UpstreamUnavailableError(
                f"Execution API call {method} timed out after {self.timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            error_type = "connection_error"
            logger.error(f"Execution API connection error: {e}")
            raise UpstreamUnavailableError(f"Execution API connection error: {e}") from e
        finally:
            latency = time.time() - start_time
            metrics.record_upstream_call("execution", method, latency, error_type)

    async def get_code(self, address: str, block: Union[str, int] = "latest") -> bytes:
        """Return the contract code at address; empty for plain accounts."""
        if not is_address(address):
            raise UpstreamDecodeError(f"Invalid address: {address!r}")

        result = await self._call("eth_getCode", [address, to_block_param(block)])

        if not isinstance(result, str) or not result.startswith("0x"):
            raise UpstreamDecodeError(f"eth_getCode returned {result!r}")
        try:
            return bytes.fromhex(result[2:])
        except ValueError as e:
            raise UpstreamDecodeError(f"eth_getCode returned invalid hex: {e}") from e

    async def close(self) -> None:
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
