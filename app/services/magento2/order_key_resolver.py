"""OrderKeyResolver service - SRP compliance."""

import logging
from collections.abc import Mapping
from typing import Any

from app.utils.error_handler import MissingFieldError

logger = logging.getLogger(__name__)


class OrderKeyResolver:
    """Extracts the Magento2 order id from the cached order-submission input."""

    document_name = "cached order input"

    def resolve(self, cached_input: Mapping[str, Any]) -> str:
        """
        Return ``order.order_id_unique`` as a string.

        Raises:
            MissingFieldError: If ``order`` or ``order_id_unique`` is missing or empty
        """
        order = cached_input.get("order") if isinstance(cached_input, Mapping) else None
        if not isinstance(order, Mapping):
            raise MissingFieldError("order", document=self.document_name)

        order_id_unique = order.get("order_id_unique")
        if order_id_unique is None or str(order_id_unique).strip() == "":
            raise MissingFieldError("order.order_id_unique", document=self.document_name)

        logger.debug(f"Resolved order_id_unique: {order_id_unique}")
        return str(order_id_unique)
