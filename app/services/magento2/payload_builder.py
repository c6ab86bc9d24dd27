"""
StatusPayloadBuilder - builds the Magento2 status comment from a COVER response.

The comment is HTML, as rendered in the Magento2 order history, and the
success text is German because it is shown to the shop's back office.
"""

import json
import logging
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from app.core.config import get_settings
from app.domain.value_objects import STATUS_COMPLETE, StatusUpdate
from app.utils.error_handler import MalformedErrorCodeError, MissingFieldError

logger = logging.getLogger(__name__)

COMMENT_HEADER = "<b>Response from COVER</b><br>"
SUCCESS_MESSAGE = "Bestellung wurde erfolgreich verarbeitet."

_NUMERIC_CODE = re.compile(r"[+-]?\d+")


def format_created_at(moment: datetime) -> str:
    """Format as ``yyyy-MM-ddTHH:mm:ss.SSSZ`` in UTC (naive values are taken as UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{moment.microsecond // 1000:03d}Z"


def parse_error_code(error_code: Any) -> int:
    """
    Parse COVER's ``error_code`` (a numeric string).

    Raises:
        MalformedErrorCodeError: If the value is not an integer
    """
    if isinstance(error_code, bool):
        raise MalformedErrorCodeError(error_code)
    if isinstance(error_code, int):
        return error_code
    if isinstance(error_code, str) and _NUMERIC_CODE.fullmatch(error_code):
        return int(error_code)
    raise MalformedErrorCodeError(error_code)


def build_comment(error_code: str, error_msg: str) -> str:
    """HTML comment for the order history; ``error_code`` is embedded as received."""
    if parse_error_code(error_code) != 0:
        return f"{COMMENT_HEADER} Status: {error_code} Antwort: {error_msg}"
    return f"{COMMENT_HEADER} Status: {error_code} Antwort: {SUCCESS_MESSAGE}"


class StatusPayloadBuilder:
    """Builds and serializes StatusUpdate records (SRP: payload only)."""

    document_name = "COVER response"

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        wrap_status_history: bool | None = None,
    ):
        """
        Args:
            clock: Returns the current time (default: UTC now)
            wrap_status_history: Wrap the body as ``{"statusHistory": {...}}``
                (default: MAGENTO2_WRAP_STATUS_HISTORY)
        """
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        if wrap_status_history is None:
            wrap_status_history = get_settings().MAGENTO2_WRAP_STATUS_HISTORY
        self.wrap_status_history = wrap_status_history

    def build(self, cover_response: Mapping[str, Any]) -> StatusUpdate:
        """
        Derive the status update from a COVER response.

        Raises:
            MissingFieldError: If ``order.error.error_code`` is absent
            MalformedErrorCodeError: If ``error_code`` is not numeric
        """
        created_at = format_created_at(self.clock())
        error = self._error_record(cover_response)

        error_code = error.get("error_code")
        if error_code is None:
            raise MissingFieldError("order.error.error_code", document=self.document_name)
        error_msg = error.get("error_msg") or ""

        if isinstance(error_code, int) and not isinstance(error_code, bool):
            error_code = str(error_code)

        comment = build_comment(error_code, error_msg)
        return StatusUpdate(
            entry_id=0,
            created_at=created_at,
            comment=comment,
            status=STATUS_COMPLETE,
            is_customer_notified=0,
        )

    def serialize(self, update: StatusUpdate) -> str:
        """
        Compact JSON body for Magento2.

        A serialization failure is logged and yields an empty string.
        """
        try:
            if self.wrap_status_history:
                body = json.dumps({"statusHistory": update.to_dict()}, separators=(",", ":"), ensure_ascii=False)
            else:
                body = update.to_json()
            # body must be encodable as UTF-8
            body.encode("utf-8")
            return body
        except (TypeError, ValueError) as e:
            logger.error(f"Error! While creating String from Magento2-Record: {e}")
            return ""

    def build_json(self, cover_response: Mapping[str, Any]) -> str:
        return self.serialize(self.build(cover_response))

    def _error_record(self, cover_response: Mapping[str, Any]) -> Mapping[str, Any]:
        order = cover_response.get("order") if isinstance(cover_response, Mapping) else None
        if not isinstance(order, Mapping):
            raise MissingFieldError("order", document=self.document_name)
        error = order.get("error")
        if not isinstance(error, Mapping):
            raise MissingFieldError("order.error", document=self.document_name)
        return error
