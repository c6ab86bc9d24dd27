"""
Magento2 REST client.

Thin aiohttp transport for the Magento2 REST API. Non-2xx answers and
network errors raise Magento2TransportError; bodies that are not valid
JSON raise Magento2ResponseParseError. Retrying is left to the caller.
"""

import asyncio
import json
import logging
import time
from typing import Any, Optional

import aiohttp
from aiohttp import ClientTimeout

from app.core.config import get_settings
from app.core.logging_config import log_api_call
from app.utils.error_handler import Magento2ResponseParseError, Magento2TransportError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json;charset=utf-8"


class Magento2RestClient:
    """
    Client for Magento2 REST calls.

    The HTTP session is created lazily and shared by every request sent
    through this client; call ``close()`` (or use ``async with``) when done.
    """

    def __init__(self, timeout: Optional[float] = None, session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize the client.

        Args:
            timeout: Total timeout per request in seconds (default: MAGENTO2_REQUEST_TIMEOUT)
            session: Existing session to reuse (the client will not close it)
        """
        self.settings = get_settings()
        self.timeout = timeout if timeout is not None else self.settings.MAGENTO2_REQUEST_TIMEOUT
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "Magento2RestClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def initialize(self):
        """Create the HTTP session if none was injected."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers={"User-Agent": f"{self.settings.APP_NAME}/{self.settings.APP_VERSION}"},
            )
            self._owns_session = True
            logger.info(f"Initialized Magento2 REST client (timeout={self.timeout}s)")

    async def close(self):
        """Close the HTTP session and clean up resources."""
        if self.session and self._owns_session:
            await self.session.close()
            logger.info("Magento2 REST client closed")
        if self._owns_session:
            self.session = None

    async def post(self, url: str, body: str, headers: dict[str, str]) -> Any:
        """
        POST a raw body and return the parsed JSON answer.

        Args:
            url: Absolute endpoint URL
            body: Request body, sent as UTF-8
            headers: Request headers

        Returns:
            Parsed JSON body, or None for an empty body

        Raises:
            Magento2TransportError: On network errors, timeouts or non-2xx answers
            Magento2ResponseParseError: If the answer is not valid JSON
        """
        await self.initialize()

        start_time = time.time()
        try:
            async with self.session.post(url, data=body.encode("utf-8"), headers=headers) as response:
                status = response.status
                reason = response.reason or ""
                raw = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise Magento2TransportError(
                f"Network error calling Magento2: {type(e).__name__}: {e}",
                endpoint=url,
            ) from e

        log_api_call("POST", url, status, time.time() - start_time)

        if not 200 <= status < 300:
            raise Magento2TransportError(
                f"HTTP {status} from Magento2",
                status_code=status,
                status_text=reason,
                response_body=raw.decode("utf-8", errors="replace"),
                endpoint=url,
            )

        return self.parse_response(raw)

    @staticmethod
    def parse_response(raw: bytes | str) -> Any:
        """
        Parse a Magento2 response body.

        Raises:
            Magento2ResponseParseError: If the body is not UTF-8 or not valid JSON
        """
        if isinstance(raw, bytes):
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise Magento2ResponseParseError(
                    f"Magento2 response is not valid UTF-8: {e}", body=raw.decode("utf-8", errors="replace")
                ) from e
        else:
            text = raw

        if not text or not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise Magento2ResponseParseError(f"Invalid JSON in Magento2 response: {e}", body=text) from e

    def __repr__(self):
        return f"Magento2RestClient(timeout={self.timeout}, initialized={self.session is not None})"
