"""
COVER-Magento2 Status Sync - FastAPI Application Entry Point

Publica el estado de procesamiento de pedidos de COVER como comentarios
en los pedidos de Magento2.

Versión: Definida en pyproject.toml
"""

import logging

import uvicorn
from fastapi import FastAPI

from app.core.config import get_settings
from app.core.exception_handlers import configure_exception_handlers
from app.core.lifespan import lifespan
from app.core.routers import configure_all_routers

settings = get_settings()
logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """
    Factory para crear y configurar la aplicación FastAPI.

    Returns:
        FastAPI: Instancia configurada de la aplicación
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="Sincronización de estado de pedidos COVER → Magento2",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if (settings.DEBUG or settings.ENABLE_DOCS) else None,
        redoc_url="/redoc" if (settings.DEBUG or settings.ENABLE_DOCS) else None,
        openapi_url="/openapi.json" if (settings.DEBUG or settings.ENABLE_DOCS) else None,
    )

    # 1. Manejadores de excepciones
    configure_exception_handlers(app)

    # 2. Routers y endpoints
    configure_all_routers(app)

    logger.info("✅ Aplicación FastAPI creada y configurada")
    return app


app = create_application()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
