"""
Módulo de acceso a sistemas externos para COVER-Magento2 Status Sync.

- Magento2RestClient: transporte HTTP hacia la API REST de Magento2
"""

from app.db.magento2_client import JSON_CONTENT_TYPE, Magento2RestClient

__all__ = [
    "Magento2RestClient",
    "JSON_CONTENT_TYPE",
]
