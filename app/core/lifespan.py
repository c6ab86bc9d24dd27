"""
Gestión del ciclo de vida de la aplicación FastAPI.

Este módulo maneja los eventos de startup y shutdown de la aplicación:
logging, verificación de configuración y creación/cierre del cliente de Magento2.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.db.magento2_client import Magento2RestClient
from app.services.magento2 import create_status_sync_orchestrator
from app.utils.error_handler import ConfigurationException

settings = get_settings()
logger = logging.getLogger(__name__)

_PLACEHOLDER_TOKEN = "your-access-token"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestión del ciclo de vida de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    # === STARTUP ===
    setup_logging()
    logger.info(f"🚀 Iniciando {settings.APP_NAME}...")

    verify_configuration()

    client = Magento2RestClient()
    await client.initialize()
    app.state.magento2_client = client
    app.state.status_sync_orchestrator = create_status_sync_orchestrator(client=client)
    logger.info("🎉 Aplicación iniciada correctamente")

    yield

    # === SHUTDOWN ===
    logger.info(f"🛑 Cerrando {settings.APP_NAME}...")
    await client.close()
    logger.info("👋 Aplicación cerrada correctamente")


def verify_configuration() -> None:
    """
    Verifica que la configuración sea utilizable.

    Raises:
        ConfigurationException: Si en producción falta el token de Magento2
    """
    if settings.is_production and settings.MAGENTO2_ACCESS_TOKEN in ("", _PLACEHOLDER_TOKEN):
        raise ConfigurationException(
            "MAGENTO2_ACCESS_TOKEN debe configurarse en producción",
            setting="MAGENTO2_ACCESS_TOKEN",
        )

    if settings.MAGENTO2_ACCESS_TOKEN in ("", _PLACEHOLDER_TOKEN):
        logger.warning("⚠️ MAGENTO2_ACCESS_TOKEN no configurado - se requiere shop_auth_token por request")

    logger.info(
        f"✅ Configuración verificada - redelivery: {settings.MAGENTO2_REDELIVERY_ATTEMPTS} intentos, "
        f"{settings.MAGENTO2_REDELIVERY_DELAY_MS}ms"
    )
