"""Async HTTP client for the Gmail REST API."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from .config import GmailConfig
from .errors import NotFoundError, UpstreamError

logger = structlog.get_logger()


class GmailClient:
    """Thin wrapper over ``users.messages.list`` and ``users.messages.get``.

    One :class:`httpx.AsyncClient` is shared by every call; the bearer
    token is supplied per call so a single client can serve many users.
    HTTP failures are translated into :class:`UpstreamError` (or
    :class:`NotFoundError` for a 404 on a single message).
    """

    def __init__(self, config: GmailConfig) -> None:
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=httpx.Timeout(self._config.timeout_seconds),
        )
        logger.info("gmail_client_started", base_url=self._config.base_url)

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("gmail_client_stopped")

    # ------------------------------------------------------------------
    # API calls
    # ------------------------------------------------------------------

    async def list_message_ids(self, credential: str, query: str) -> list[str]:
        """Return the ids of the first page of messages matching *query*."""
        params: dict[str, Any] = {"maxResults": self._config.page_size}
        if query:
            params["q"] = query

        data = await self._get(credential, self._messages_path(), params=params)
        messages = data.get("messages") or []
        ids = [m["id"] for m in messages if m.get("id")]
        logger.debug(
            "gmail_messages_listed",
            count=len(ids),
            has_more=bool(data.get("nextPageToken")),
        )
        return ids

    async def get_message(
        self,
        credential: str,
        message_id: str,
        *,
        fmt: str = "full",
    ) -> dict[str, Any]:
        """Fetch one message resource.

        Raises :class:`NotFoundError` when Gmail rejects the id (404 or 400).
        """
        return await self._get(
            credential,
            f"{self._messages_path()}/{quote(message_id, safe='')}",
            params={"format": fmt},
            message_id=message_id,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _messages_path(self) -> str:
        return f"/users/{self._config.user_id}/messages"

    async def _get(
        self,
        credential: str,
        path: str,
        *,
        params: dict[str, Any],
        message_id: str | None = None,
    ) -> dict[str, Any]:
        if self._client is None:
            await self.start()
        assert self._client is not None

        try:
            response = await self._client.get(
                path,
                params=params,
                headers={"Authorization": f"Bearer {credential}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            # Gmail answers a malformed id with 400 "Invalid id value"
            if status in (400, 404) and message_id is not None:
                raise NotFoundError(f"Email {message_id} not found", cause=exc) from exc
            logger.warning("gmail_request_rejected", path=path, status_code=status)
            raise UpstreamError(
                f"Gmail API rejected request ({status})",
                status_code=status,
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("gmail_request_failed", path=path, error=str(exc))
            raise UpstreamError(f"Gmail API request failed: {exc}", cause=exc) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                "Gmail API returned a non-JSON response",
                status_code=response.status_code,
                cause=exc,
            ) from exc
