"""
Pipeline state for a single COVER → Magento2 status sync.

One instance is created per sync request and passed through every stage;
nothing in it is shared between requests.
"""

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from app.utils.retry_handler import DeliveryResult


@dataclass
class PipelineState:
    """
    Per-request state shared by the sync stages.

    Attributes:
        cached_input: Original order-submission document (``order.order_id_unique``)
        cover_response: COVER answer for that submission (``order.error.*``)
        shop_url: Magento2 base URL, without trailing slash
        shop_auth_token: Bearer token for the Magento2 REST API
        order_id_unique: Target order id, set by the key resolution stage
        magento2_json: Serialized StatusUpdate, set by the payload stage
        upsert_failed: True until delivery is suppressed after exhausting retries,
            then False. A successful delivery leaves it untouched.
        delivery: Outcome of the send stage (None until it ran)
    """

    cached_input: dict[str, Any]
    cover_response: dict[str, Any]
    shop_url: str
    shop_auth_token: str
    order_id_unique: str = ""
    magento2_json: str = ""
    upsert_failed: bool = True
    delivery: DeliveryResult | None = field(default=None, repr=False)

    @property
    def comments_url(self) -> str:
        """Magento2 order-comments endpoint for this order."""
        if not self.order_id_unique:
            raise ValueError("order_id_unique must be resolved before composing the comments URL")
        return f"{self.shop_url.rstrip('/')}/rest/V1/orders/{quote(self.order_id_unique, safe='')}/comments"

    @property
    def delivered(self) -> bool:
        return self.delivery is not None and self.delivery.delivered

    def mark_suppressed(self, delivery: DeliveryResult) -> None:
        """Record a delivery that exhausted its retries without raising."""
        self.delivery = delivery
        self.upsert_failed = False
