"""
Factory for the Magento2 status sync orchestrator.

Wires the services together from Settings so callers only deal with
the orchestrator.
"""

import asyncio
from typing import Any, Awaitable, Callable

from app.core.config import get_settings
from app.db.magento2_client import Magento2RestClient
from app.services.magento2.order_key_resolver import OrderKeyResolver
from app.services.magento2.orchestrator import Magento2StatusSyncOrchestrator
from app.services.magento2.payload_builder import StatusPayloadBuilder
from app.utils.retry_handler import create_magento2_redelivery_handler


def create_status_sync_orchestrator(
    client: Magento2RestClient | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Magento2StatusSyncOrchestrator:
    """
    Create an orchestrator configured from Settings.

    Args:
        client: Transport to use (default: a new Magento2RestClient)
        sleep: Wait coroutine used between redeliveries

    Returns:
        Magento2StatusSyncOrchestrator: Ready-to-use orchestrator
    """
    settings = get_settings()
    return Magento2StatusSyncOrchestrator(
        key_resolver=OrderKeyResolver(),
        payload_builder=StatusPayloadBuilder(),
        client=client or Magento2RestClient(),
        redelivery_handler=create_magento2_redelivery_handler(sleep=sleep),
        deadline_seconds=settings.MAGENTO2_SYNC_DEADLINE_SECONDS,
    )
