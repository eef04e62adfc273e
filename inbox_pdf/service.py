"""Mail Query Service: filter set in, normalized emails out."""

from __future__ import annotations

import asyncio

import structlog

from .config import GmailConfig
from .errors import MalformedMessageError
from .gmail_client import GmailClient
from .models import Email, FilterSet
from .parser import parse_message
from .query import build_query

logger = structlog.get_logger()


class MailQueryService:
    """Searches a mailbox and hydrates matching messages into :class:`Email` records.

    A search issues one bounded list request (``config.page_size``
    results, no further pages) and then fetches every message detail
    concurrently.  Results keep the order of the list response.

    Use as an async context manager, or call :meth:`start` / :meth:`stop`::

        async with MailQueryService(GmailConfig()) as service:
            emails = await service.list_emails(token, FilterSet(sender="a@b.c"))
    """

    def __init__(self, config: GmailConfig, *, client: GmailClient | None = None) -> None:
        self._client = client or GmailClient(config)

    async def start(self) -> None:
        await self._client.start()

    async def stop(self) -> None:
        await self._client.stop()

    async def __aenter__(self) -> MailQueryService:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_emails(self, credential: str, filters: FilterSet) -> list[Email]:
        """Return the emails matching *filters*.

        With ``filters.id`` set, exactly one email is returned (or
        :class:`~inbox_pdf.errors.NotFoundError` raised).
        """
        if filters.id:
            return [await self._fetch_email(credential, filters.id)]

        query = build_query(filters)
        ids = await self._client.list_message_ids(credential, query)
        if not ids:
            logger.info("gmail_search_empty", query=query)
            return []

        emails = await asyncio.gather(*(self._fetch_email(credential, i) for i in ids))
        logger.info("gmail_search_hydrated", query=query, count=len(emails))
        return list(emails)

    async def list_email_ids(self, credential: str, filters: FilterSet) -> list[str]:
        """Return the ids :meth:`list_emails` would return, without hydrating bodies."""
        if filters.id:
            await self._client.get_message(credential, filters.id, fmt="minimal")
            return [filters.id]

        return await self._client.list_message_ids(credential, build_query(filters))

    async def _fetch_email(self, credential: str, message_id: str) -> Email:
        data = await self._client.get_message(credential, message_id)
        try:
            return parse_message(message_id, data)
        except MalformedMessageError as exc:
            logger.warning("gmail_message_malformed", message_id=message_id, error=exc.message)
            return Email(id=message_id)
