"""
Modelos Pydantic para el endpoint de sincronización de estado hacia Magento2.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class OrderStatusSyncRequest(BaseModel):
    """Petición del flujo de pedidos para publicar la respuesta de COVER en Magento2."""

    cached_input: Dict[str, Any] = Field(..., description="Input original cacheado (order.order_id_unique)")
    cover_response: Dict[str, Any] = Field(..., description="Respuesta de COVER (order.error.*)")
    shop_url: Optional[str] = Field(None, description="URL base de Magento2 (default: config)")
    shop_auth_token: Optional[str] = Field(None, description="Bearer token de Magento2 (default: config)")
    timeout: Optional[float] = Field(None, gt=0, description="Límite en segundos para el envío")


class OrderStatusSyncResult(BaseModel):
    """Resultado de una sincronización de estado."""

    order_id_unique: str
    delivered: bool
    upsert_failed: bool
    attempts: int
    error: Optional[str] = None


class OrderStatusSyncResponse(BaseModel):
    """Respuesta del endpoint de sincronización."""

    status: str
    data: OrderStatusSyncResult
    message: str
