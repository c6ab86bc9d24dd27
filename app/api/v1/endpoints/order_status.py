"""
Endpoint para publicar el estado de procesamiento de COVER en Magento2.

El flujo de pedidos llama a este endpoint después de enviar un pedido a COVER.
Las fallas de entrega hacia Magento2 nunca se devuelven como error HTTP: se
informan en ``data.delivered`` / ``data.upsert_failed``. Solo los documentos
de entrada mal formados producen un 422.
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from app.api.v1.schemas.magento2_schemas import (
    OrderStatusSyncRequest,
    OrderStatusSyncResponse,
    OrderStatusSyncResult,
)
from app.core.config import get_settings
from app.services.magento2 import Magento2StatusSyncOrchestrator, create_status_sync_orchestrator

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


def get_status_sync_orchestrator(request: Request) -> Magento2StatusSyncOrchestrator:
    """Orquestador compartido de la aplicación (creado en el lifespan o bajo demanda)."""
    orchestrator = getattr(request.app.state, "status_sync_orchestrator", None)
    if orchestrator is None:
        orchestrator = create_status_sync_orchestrator()
        request.app.state.status_sync_orchestrator = orchestrator
    return orchestrator


@router.post("/order-status", status_code=status.HTTP_200_OK, response_model=OrderStatusSyncResponse)
async def sync_order_status(
    payload: OrderStatusSyncRequest,
    orchestrator: Magento2StatusSyncOrchestrator = Depends(get_status_sync_orchestrator),
) -> OrderStatusSyncResponse:
    """
    Publica la respuesta de COVER como comentario en el pedido de Magento2.

    Example:
        ```json
        {
            "status": "success",
            "data": {
                "order_id_unique": "1000245",
                "delivered": true,
                "upsert_failed": true,
                "attempts": 1,
                "error": null
            },
            "message": "Order status sent to Magento2"
        }
        ```
    """
    state = await orchestrator.sync_order_status(
        cached_input=payload.cached_input,
        cover_response=payload.cover_response,
        shop_url=payload.shop_url or settings.MAGENTO2_SHOP_URL,
        shop_auth_token=payload.shop_auth_token or settings.MAGENTO2_ACCESS_TOKEN,
        timeout=payload.timeout,
    )

    delivery = state.delivery
    result = OrderStatusSyncResult(
        order_id_unique=state.order_id_unique,
        delivered=state.delivered,
        upsert_failed=state.upsert_failed,
        attempts=delivery.attempts if delivery else 0,
        error=str(delivery.error) if delivery and delivery.error else None,
    )

    if state.delivered:
        return OrderStatusSyncResponse(status="success", data=result, message="Order status sent to Magento2")

    return OrderStatusSyncResponse(
        status="degraded",
        data=result,
        message="Order status could not be delivered to Magento2; workflow continues",
    )
