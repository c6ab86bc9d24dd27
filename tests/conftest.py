"""Fixtures compartidos para los tests de sincronización de estado COVER → Magento2."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from app.services.magento2.order_key_resolver import OrderKeyResolver
from app.services.magento2.orchestrator import Magento2StatusSyncOrchestrator
from app.services.magento2.payload_builder import StatusPayloadBuilder
from app.utils.retry_handler import RedeliveryHandler, RedeliveryPolicy

FIXED_NOW = datetime(2025, 1, 15, 10, 30, 0, 123456, tzinfo=UTC)


class FakeMagento2Client:
    """Cliente falso: cada llamada consume el siguiente resultado del guion."""

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    async def post(self, url, body, headers):
        self.calls.append({"url": url, "body": body, "headers": headers})
        outcome = self.outcomes.pop(0) if self.outcomes else True
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def make_client():
    """Factory de FakeMagento2Client a partir de un guion de resultados."""
    return FakeMagento2Client


@pytest.fixture
def cached_input():
    """Input cacheado del envío original a COVER."""
    return {"order": {"order_id_unique": "1000245"}}


@pytest.fixture
def cover_response_ok():
    """Respuesta de COVER sin error."""
    return {"order": {"error": {"error_code": "0", "error_msg": ""}}}


@pytest.fixture
def cover_response_error():
    """Respuesta de COVER con error de negocio."""
    return {"order": {"error": {"error_code": "17", "error_msg": "Artikel nicht verfügbar"}}}


@pytest.fixture
def payload_builder():
    """Builder con reloj fijo y sin envoltorio statusHistory."""
    return StatusPayloadBuilder(clock=lambda: FIXED_NOW, wrap_status_history=False)


@pytest.fixture
def sleep_mock():
    """Reemplazo de asyncio.sleep que registra las esperas."""
    return AsyncMock()


@pytest.fixture
def make_orchestrator(payload_builder, sleep_mock):
    """Factory de orquestadores con cliente falso y esperas registradas."""

    def _make(client, max_redeliveries=2, redelivery_delay_ms=1000, deadline_seconds=None):
        handler = RedeliveryHandler(
            name="magento2_order_status",
            policy=RedeliveryPolicy(max_redeliveries=max_redeliveries, redelivery_delay_ms=redelivery_delay_ms),
            sleep=sleep_mock,
        )
        return Magento2StatusSyncOrchestrator(
            key_resolver=OrderKeyResolver(),
            payload_builder=payload_builder,
            client=client,
            redelivery_handler=handler,
            deadline_seconds=deadline_seconds,
        )

    return _make
