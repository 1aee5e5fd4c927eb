"""HTTP API for block reward and sync duty lookups."""

import logging
from typing import Optional

from aiohttp import web

from ..exceptions import (
    FutureSlotError,
    InvalidSlotError,
    SlotNotFoundError,
    UpstreamError,
)
from ..service import EthereumService
from ..version import get_version_string
from .. import metrics

logger = logging.getLogger(__name__)

MAX_SLOT = 2**64 - 1


def parse_slot(value: str) -> int:
    """Parse a path slot parameter as an unsigned 64-bit integer."""
    if not value or not value.isascii() or not value.isdigit():
        raise InvalidSlotError(value)
    slot = int(value)
    if slot > MAX_SLOT:
        raise InvalidSlotError(value)
    return slot


def error_response(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


class RewardAPI:
    """Serves /blockreward/{slot} and /syncduties/{slot}."""

    def __init__(self, service: EthereumService, host: str = "0.0.0.0", port: int = 8080):
        self.service = service
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self._setup_routes()

    def _setup_routes(self):
        """Set up API routes."""
        self.app.router.add_get("/health", self.get_health)
        self.app.router.add_get("/version", self.get_version)
        self.app.router.add_get("/blockreward/{slot}", self.get_block_reward)
        self.app.router.add_get("/syncduties/{slot}", self.get_sync_duties)

    async def start(self):
        """Start the API server."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        logger.info(f"API listening on {self.host}:{self.port}")

    async def stop(self):
        """Stop the API server."""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None

    async def _resolve_slot(self, request: web.Request) -> int:
        """Parse the slot and reject slots past the current head.

        Raises:
            InvalidSlotError: slot is not an unsigned integer
            FutureSlotError: slot is ahead of the head
            UpstreamError: head could not be fetched
        """
        slot = parse_slot(request.match_info["slot"])
        current_slot = await self.service.get_current_slot()
        if slot > current_slot:
            raise FutureSlotError(slot, current_slot)
        return slot

    async def _guarded(self, request: web.Request, failure: str, query) -> web.Response:
        try:
            slot = await self._resolve_slot(request)
        except InvalidSlotError:
            return error_response("Invalid slot number", 400)
        except FutureSlotError:
            return error_response("Requested slot is in the future", 400)
        except UpstreamError as e:
            logger.error(f"Failed to get current slot: {e}")
            return error_response("Failed to get current slot", 500)

        try:
            return web.json_response(await query(slot))
        except SlotNotFoundError as e:
            return error_response(str(e), 404)
        except UpstreamError as e:
            logger.error(f"{failure} for slot {slot}: {e}")
            return error_response(failure, 500)

    async def _respond(self, request: web.Request, endpoint: str, failure: str, query) -> web.Response:
        response = await self._guarded(request, failure, query)
        metrics.record_api_request(endpoint, response.status)
        return response

    async def get_health(self, request: web.Request) -> web.Response:
        """GET /health"""
        return web.Response(status=200)

    async def get_version(self, request: web.Request) -> web.Response:
        """GET /version"""
        return web.json_response({"data": {"version": get_version_string()}})

    async def get_block_reward(self, request: web.Request) -> web.Response:
        """GET /blockreward/{slot}

        Fee recipient classification and total block reward in gwei.
        """
        async def query(slot: int) -> dict:
            reward = await self.service.get_block_reward(slot)
            return {"status": reward.status.value, "reward": reward.reward}

        return await self._respond(request, "blockreward", "Failed to get block reward", query)

    async def get_sync_duties(self, request: web.Request) -> web.Response:
        """GET /syncduties/{slot}

        Public keys of validators with sync committee duties at the slot.
        """
        async def query(slot: int) -> dict:
            duties = await self.service.get_sync_duties(slot)
            return {"validators": list(duties)}

        return await self._respond(request, "syncduties", "Failed to get sync duties", query)
