"""Resend API client implementation.

This module provides an async client for the parts of the Resend REST API
that Hypermail uses: sending, listing and fetching sent and received
messages, and listing domains and API keys.

Notes:
    HTTP failures are translated into the Hypermail exception hierarchy at
    this boundary, so callers only ever catch ``HypermailError`` subclasses.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from hypermail import __version__
from hypermail.config import Settings, get_settings
from hypermail.exceptions import AuthenticationError, ResendAPIError
from hypermail.models import OutgoingEmail, RemoteMessage
from hypermail.resend.parsing import message_from_payload, messages_from_list_payload

logger = structlog.get_logger()

_AUTH_FAILURE_CODES = (401, 403)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return f"HTTP {response.status_code} from {response.request.url.path}"


class ResendClient:
    """Resend API client for email operations.

    The client owns an ``httpx.AsyncClient``; call :meth:`aclose` when done.
    """

    def __init__(
        self,
        api_key: str,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Resend client.

        Args:
            api_key: Resend API key used as bearer token.
            settings: Application settings. If None, uses default settings.
            transport: Optional httpx transport, used by tests.
        """
        self.settings = settings or get_settings()
        self._http = httpx.AsyncClient(
            base_url=self.settings.resend_api_url,
            timeout=self.settings.resend_timeout,
            headers={
                "Authorization": f"Bearer {api_key}",
                "User-Agent": f"hypermail/{__version__}",
            },
            transport=transport,
        )
        logger.info("resend_client_initialized", base_url=self.settings.resend_api_url)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def send_email(self, email: OutgoingEmail) -> str:
        """Send a message.

        Args:
            email: The message to send.

        Returns:
            The ID Resend assigned to the message.

        Raises:
            AuthenticationError: If the API key is rejected.
            ResendAPIError: If the API request fails.
        """

        logger.info("sending_email", recipient_count=len(email.to))
        data = await self._request("POST", "/emails", json=email.to_payload())
        email_id = str(data.get("id") or "")
        logger.info("email_sent", email_id=email_id)
        return email_id

    async def list_sent_emails(self) -> list[RemoteMessage]:
        """List messages sent through this account, newest first."""

        logger.info("listing_sent_emails")
        return messages_from_list_payload(await self._request("GET", "/emails"))

    async def get_sent_email(self, email_id: str) -> RemoteMessage:
        """Get a sent message including its body."""

        logger.info("getting_sent_email", email_id=email_id)
        return message_from_payload(await self._request("GET", f"/emails/{email_id}"))

    async def list_received_emails(self) -> list[RemoteMessage]:
        """List messages received on the account's receiving domains."""

        logger.info("listing_received_emails")
        return messages_from_list_payload(await self._request("GET", "/emails/receiving"))

    async def get_received_email(self, email_id: str) -> RemoteMessage:
        """Get a received message including its body."""

        logger.info("getting_received_email", email_id=email_id)
        return message_from_payload(await self._request("GET", f"/emails/receiving/{email_id}"))

    async def list_domains(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/domains")
        return list(data.get("data") or [])

    async def list_api_keys(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/api-keys")
        return list(data.get("data") or [])

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("resend_request_failed", method=method, path=path, error=str(exc))
            raise ResendAPIError(f"Could not reach Resend: {exc}") from exc

        if response.status_code in _AUTH_FAILURE_CODES:
            message = _error_message(response)
            logger.warning("resend_auth_failed", path=path, status=response.status_code)
            raise AuthenticationError(message)

        if response.is_error:
            message = _error_message(response)
            logger.error(
                "resend_request_error", method=method, path=path, status=response.status_code
            )
            raise ResendAPIError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise ResendAPIError(
                f"Invalid JSON from Resend for {path}", status_code=response.status_code
            ) from exc
        if not isinstance(data, dict):
            raise ResendAPIError(
                f"Unexpected response shape for {path}", status_code=response.status_code
            )
        return data


async def validate_api_key(
    api_key: str,
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Check a candidate key by making a harmless authenticated call.

    Returns:
        True if Resend accepts the key, False if it rejects it.

    Raises:
        ResendAPIError: If the check itself failed (network, server error).
    """

    client = ResendClient(api_key, settings, transport=transport)
    try:
        await client.list_domains()
    except AuthenticationError:
        logger.info("api_key_rejected")
        return False
    finally:
        await client.aclose()

    logger.info("api_key_validated")
    return True
