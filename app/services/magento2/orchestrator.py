"""
Magento2StatusSyncOrchestrator - posts COVER order status to Magento2.

Flow for one request:
1. Resolve the Magento2 order id from the cached input
2. Build the status-comment payload from the COVER response
3. POST it to ``{shop_url}/rest/V1/orders/{order_id_unique}/comments``

Data-contract errors from steps 1-2 abort the sync before any HTTP call.
Delivery failures in step 3 are retried by the redelivery handler and,
once exhausted, recorded on the state instead of being raised.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from app.core.logging_config import log_sync_operation
from app.db.magento2_client import JSON_CONTENT_TYPE
from app.domain.models import PipelineState
from app.services.magento2.interfaces import IMagento2Client, IOrderKeyResolver, IStatusPayloadBuilder
from app.utils.error_handler import AppException, log_error
from app.utils.retry_handler import DeliveryResult, RedeliveryHandler

logger = logging.getLogger(__name__)


def build_headers(shop_auth_token: str) -> dict[str, str]:
    """Request headers for the Magento2 comments endpoint."""
    return {
        "Authorization": f"Bearer {shop_auth_token}",
        "Content-Type": JSON_CONTENT_TYPE,
    }


def mask_headers(headers: dict[str, str]) -> dict[str, str]:
    """Copy of ``headers`` safe for logging."""
    masked = dict(headers)
    if "Authorization" in masked:
        masked["Authorization"] = "Bearer ***"
    return masked


class Magento2StatusSyncOrchestrator:
    """
    Orchestrates the status-comment update from COVER to Magento2.

    The orchestrator holds no per-request state, so one instance can serve
    concurrent syncs; each sync works on its own PipelineState.
    """

    def __init__(
        self,
        key_resolver: IOrderKeyResolver,
        payload_builder: IStatusPayloadBuilder,
        client: IMagento2Client,
        redelivery_handler: RedeliveryHandler,
        deadline_seconds: float | None = None,
    ):
        """
        Initialize orchestrator with service dependencies (DIP).

        Args:
            key_resolver: Extracts order_id_unique from the cached input
            payload_builder: Builds the serialized status update
            client: Magento2 transport
            redelivery_handler: Retry supervision for the HTTP stage
            deadline_seconds: Default upper bound for the whole delivery stage
        """
        self.key_resolver = key_resolver
        self.payload_builder = payload_builder
        self.client = client
        self.redelivery_handler = redelivery_handler
        self.deadline_seconds = deadline_seconds

    async def sync_order_status(
        self,
        cached_input: Mapping[str, Any],
        cover_response: Mapping[str, Any],
        shop_url: str,
        shop_auth_token: str,
        timeout: float | None = None,
    ) -> PipelineState:
        """Create a fresh PipelineState and run the sync on it."""
        state = PipelineState(
            cached_input=dict(cached_input),
            cover_response=dict(cover_response),
            shop_url=shop_url,
            shop_auth_token=shop_auth_token,
        )
        return await self.sync(state, timeout=timeout)

    async def sync(self, state: PipelineState, timeout: float | None = None) -> PipelineState:
        """
        Run the pipeline on ``state``.

        Args:
            state: Pre-populated pipeline state
            timeout: Deadline in seconds for the delivery stage (default: deadline_seconds)

        Returns:
            PipelineState: The same state, with order id, payload and delivery outcome set

        Raises:
            MissingFieldError: If the order id or the COVER error record is missing
            MalformedErrorCodeError: If COVER's error_code is not numeric
        """
        logger.info(f"Body Update Magento2 {state.cover_response}")

        try:
            state.order_id_unique = self.key_resolver.resolve(state.cached_input)
            state.magento2_json = self.payload_builder.build_json(state.cover_response)
        except AppException as e:
            log_error(e, context={"stage": "prepare", "order_id_unique": state.order_id_unique or None})
            raise

        logger.info(f"Json body: {state.magento2_json}")

        url = state.comments_url
        headers = build_headers(state.shop_auth_token)
        logger.debug(f"Headers: {mask_headers(headers)}")
        logger.debug(url)

        deadline = timeout if timeout is not None else self.deadline_seconds
        delivery = await self._deliver(state, url, headers, deadline)

        if delivery.delivered:
            state.delivery = delivery
            logger.info(f"Body after Magento2 Update: {delivery.value}")
        else:
            state.mark_suppressed(delivery)
            logger.warning(
                f"Status update for order {state.order_id_unique} not delivered after "
                f"{delivery.attempts} attempt(s) - continuing"
            )

        log_sync_operation(
            "status_update",
            "magento2",
            order_id_unique=state.order_id_unique,
            delivered=delivery.delivered,
            attempts=delivery.attempts,
        )
        return state

    async def _deliver(
        self, state: PipelineState, url: str, headers: dict[str, str], deadline: float | None
    ) -> DeliveryResult:
        attempts = 0

        async def send() -> Any:
            nonlocal attempts
            attempts += 1
            return await self.client.post(url, state.magento2_json, headers)

        supervised = self.redelivery_handler.execute(
            send, context={"order_id_unique": state.order_id_unique, "url": url}
        )
        if deadline is None:
            return await supervised

        try:
            return await asyncio.wait_for(supervised, timeout=deadline)
        except asyncio.TimeoutError as e:
            logger.error(
                f"Magento2 status update for order {state.order_id_unique} exceeded "
                f"deadline of {deadline}s after {attempts} attempt(s)"
            )
            return DeliveryResult(delivered=False, attempts=attempts, error=e)
