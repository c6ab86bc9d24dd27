"""
StatusUpdate value object for Magento2 order comments.

Field names on the wire follow the Magento2 ``salesOrderManagementV1``
status-history contract and must not change.
"""

import json
from dataclasses import asdict, dataclass
from typing import Any

STATUS_COMPLETE = "complete"


@dataclass(frozen=True)
class StatusUpdate:
    """
    Immutable status-history entry posted to ``/rest/V1/orders/{id}/comments``.

    Attributes:
        created_at: Timestamp in ``yyyy-MM-ddTHH:mm:ss.SSSZ`` (UTC)
        comment: HTML comment shown in the order history
        entry_id: Always 0 (Magento2 assigns the real id)
        status: Order status to set
        is_customer_notified: 0 = do not notify the customer

    Example:
        >>> update = StatusUpdate(created_at="2025-01-15T10:30:00.000Z", comment="ok")
        >>> StatusUpdate.from_json(update.to_json()) == update
        True
    """

    created_at: str
    comment: str
    entry_id: int = 0
    status: str = STATUS_COMPLETE
    is_customer_notified: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Wire representation, in the field order Magento2 documents."""
        data = asdict(self)
        return {
            "entry_id": data["entry_id"],
            "created_at": data["created_at"],
            "comment": data["comment"],
            "status": data["status"],
            "is_customer_notified": data["is_customer_notified"],
        }

    def to_json(self) -> str:
        """Compact JSON (no whitespace, non-ASCII kept as is)."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StatusUpdate":
        return cls(
            entry_id=int(data["entry_id"]),
            created_at=data["created_at"],
            comment=data["comment"],
            status=data["status"],
            is_customer_notified=int(data["is_customer_notified"]),
        )

    @classmethod
    def from_json(cls, raw: str) -> "StatusUpdate":
        data = json.loads(raw)
        # Accept the {"statusHistory": {...}} envelope as well
        if "statusHistory" in data:
            data = data["statusHistory"]
        return cls.from_dict(data)
