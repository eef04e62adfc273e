"""Document Renderer: emails -> HTML -> PDF bytes."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from .engine import BrowserEngine, get_engine
from .errors import NotFoundError, ValidationError
from .models import Email, FilterSet
from .service import MailQueryService
from .templates import render_email_html, render_emails_html

logger = structlog.get_logger()


class DocumentRenderer:
    """Renders one or many mailbox messages into a single PDF.

    Emails are looked up through *service*; PDFs are produced by
    *engine*, which defaults to the process-wide :func:`get_engine`.
    """

    def __init__(self, service: MailQueryService, engine: BrowserEngine | None = None) -> None:
        self._service = service
        self._engine = engine or get_engine()

    async def render_email(self, credential: str, email_id: str) -> bytes:
        """PDF for one email.  Raises :class:`NotFoundError` if it does not exist."""
        if not email_id:
            raise ValidationError("An email id is required")

        emails = await self._service.list_emails(credential, FilterSet(id=email_id))
        if not emails:
            raise NotFoundError(f"Email {email_id} not found")

        return await self._engine.render_pdf(render_email_html(emails[0]))

    async def render_emails(self, credential: str, email_ids: Sequence[str]) -> bytes:
        """One PDF holding every email in *email_ids*, each on its own page(s).

        Ids that do not resolve are skipped.  Returns ``b""`` when nothing
        is left to render; the browser is not touched in that case.
        """
        if not email_ids:
            return b""

        found = await asyncio.gather(*(self._lookup(credential, i) for i in email_ids))
        emails = [email for email in found if email is not None]
        if not emails:
            logger.info("render_emails_nothing_found", requested=len(email_ids))
            return b""

        logger.info("render_emails", requested=len(email_ids), found=len(emails))
        return await self._engine.render_pdf(render_emails_html(emails))

    async def _lookup(self, credential: str, email_id: str) -> Email | None:
        if not email_id:
            return None
        try:
            emails = await self._service.list_emails(credential, FilterSet(id=email_id))
        except NotFoundError:
            logger.info("email_skipped_not_found", email_id=email_id)
            return None
        return emails[0] if emails else None
