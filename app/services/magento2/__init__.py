"""
Magento2 status sync services.

This package contains the services that push COVER order status to
Magento2 as order comments.
"""

from .factories import create_status_sync_orchestrator
from .order_key_resolver import OrderKeyResolver
from .orchestrator import Magento2StatusSyncOrchestrator
from .payload_builder import StatusPayloadBuilder

__all__ = [
    "Magento2StatusSyncOrchestrator",
    "OrderKeyResolver",
    "StatusPayloadBuilder",
    "create_status_sync_orchestrator",
]
