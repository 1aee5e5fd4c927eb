"""Service orchestration."""

import asyncio
import logging

from .api import RewardAPI
from .beacon_client import BeaconClient
from .config import Config
from .execution import ExecutionClient
from .service import EthereumService
from .version import get_version
from . import metrics

logger = logging.getLogger(__name__)


def build_service(config: Config) -> EthereumService:
    """Wire the upstream clients into an EthereumService."""
    beacon_client = BeaconClient(config.beacon_url, timeout=config.request_timeout)
    execution_client = ExecutionClient(config.execution_url, timeout=config.request_timeout)
    return EthereumService(beacon_client, execution_client, cache_size=config.cache_size)


async def run_app(config: Config) -> None:
    """Run the API server until cancelled."""
    service = build_service(config)
    api = RewardAPI(service, host=config.listen_host, port=config.listen_port)

    if config.metrics_port:
        metrics.start_metrics_server(config.metrics_port)
        metrics.set_service_info(get_version())

    try:
        await api.start()
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        await api.stop()
        await service.beacon_client.close()
        await service.execution_client.close()
        logger.info("Stopped")
