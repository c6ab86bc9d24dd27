"""
Configuración centralizada de routers para la aplicación FastAPI.

Este módulo se encarga de registrar los routers de la API
y los endpoints base.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI

from app.api.v1.endpoints.order_status import router as order_status_router
from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def create_root_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints raíz de la aplicación.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/", tags=["Root"], summary="API Info")
    async def root():
        """
        Endpoint raíz que proporciona información básica de la API.
        """
        return {
            "message": settings.APP_NAME,
            "description": "Publica el estado de procesamiento de COVER en Magento2",
            "version": settings.APP_VERSION,
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "ping": "/ping",
                "order_status": "/api/v1/magento2/order-status",
            },
        }

    @app.get("/ping", tags=["Root"], summary="Simple Ping")
    async def ping():
        """Endpoint simple para verificar que la API responde."""
        return {"message": "pong", "timestamp": datetime.now(timezone.utc).isoformat()}


def configure_all_routers(app: FastAPI) -> None:
    """
    Registra todos los routers de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    create_root_endpoints(app)

    app.include_router(order_status_router, prefix="/api/v1/magento2", tags=["Magento2"])

    logger.info("Routers configurados")
