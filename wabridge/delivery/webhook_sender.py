"""
Webhook delivery over HTTP.

Key Design Decisions:
- Pure dependency injection: the aiohttp session is owned by the caller
- Every failure step (encode, connect, status, timeout) surfaces as WebhookError
- Fan-out to several destinations is concurrent and never short-circuits
"""

import asyncio
import json
from typing import Any

import aiohttp

from wabridge.core.logging.logger import get_logger
from wabridge.domain.errors import WebhookError

SECRET_HEADER = "X-Webhook-Secret"


class WebhookSender:
    """POSTs normalized payloads to the configured webhook destinations."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        urls: list[str],
        secret: str | None = None,
        timeout: float = 10.0,
        logger: Any | None = None,
    ):
        """Initialize the sender with dependency injection.

        Args:
            session: Persistent aiohttp session managed by the caller
            urls: Destination URLs; each payload goes to all of them
            secret: Shared secret sent in the X-Webhook-Secret header
            timeout: Per-request timeout in seconds
            logger: Pre-configured logger instance
        """
        self.session = session
        self.urls = list(urls)
        self.secret = secret
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.logger = logger or get_logger(__name__)

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.secret:
            headers[SECRET_HEADER] = self.secret
        return headers

    async def post(self, url: str, payload: dict[str, Any]) -> None:
        """Send one payload to one destination.

        Args:
            url: Destination URL
            payload: JSON-serializable body

        Raises:
            WebhookError: If the body cannot be encoded, the request fails,
                times out, or the destination answers with a non-2xx status
        """
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise WebhookError(f"Failed to encode webhook payload: {e}", url=url) from e

        self.logger.debug(f"Posting webhook to {url}")
        try:
            async with self.session.post(
                url, data=body, headers=self._get_headers(), timeout=self.timeout
            ) as response:
                if response.status >= 300:
                    error_text = await response.text()
                    raise WebhookError(
                        f"Webhook {url} answered {response.status}: {error_text[:200]}",
                        url=url,
                    )
                self.logger.debug(f"Webhook {url} answered {response.status}")
        except asyncio.TimeoutError as e:
            raise WebhookError(f"Webhook {url} timed out", url=url) from e
        except aiohttp.ClientError as e:
            raise WebhookError(f"Webhook {url} request failed: {e}", url=url) from e

    async def deliver(self, payload: dict[str, Any]) -> list[WebhookError]:
        """Send a payload to every configured destination.

        Returns:
            The errors of the destinations that failed; empty on full success
        """
        if not self.urls:
            return []

        results = await asyncio.gather(
            *(self.post(url, payload) for url in self.urls), return_exceptions=True
        )

        errors: list[WebhookError] = []
        for url, result in zip(self.urls, results):
            if isinstance(result, WebhookError):
                self.logger.error(f"Failed forward to webhook {url}: {result.message}")
                errors.append(result)
            elif isinstance(result, BaseException):
                raise result
        return errors
