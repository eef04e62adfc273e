"""Download-style helpers: render a selection of emails to a named PDF.

Filename conventions:

* ``email_<id>.pdf`` for a single message
* ``emails_from_<sender>.pdf`` for everything from one sender
* ``emails_<after>_to_<before>.pdf`` for a date range (``MMDDYYYY``)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import structlog

from .errors import NotFoundError, ValidationError
from .models import FilterSet
from .renderer import DocumentRenderer
from .service import MailQueryService

logger = structlog.get_logger()

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.@\-]")


@dataclass(frozen=True)
class ExportedDocument:
    """A rendered PDF and the filename it should be saved or served as."""

    filename: str
    content: bytes

    @property
    def is_empty(self) -> bool:
        return not self.content

    def write_to(self, directory: str | Path) -> Path:
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.content)
        logger.info("pdf_written", path=str(path), size=len(self.content))
        return path


def safe_filename(name: str) -> str:
    """Replace characters that are unsafe in filenames."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def email_filename(email_id: str) -> str:
    return safe_filename(f"email_{email_id}.pdf")


def sender_filename(sender: str) -> str:
    return safe_filename(f"emails_from_{sender}.pdf")


def date_range_filename(after: str, before: str) -> str:
    return safe_filename(f"emails_{after}_to_{before}.pdf")


async def export_email(
    renderer: DocumentRenderer,
    credential: str,
    email_id: str,
) -> ExportedDocument:
    content = await renderer.render_email(credential, email_id)
    return ExportedDocument(email_filename(email_id), content)


async def export_emails_from(
    service: MailQueryService,
    renderer: DocumentRenderer,
    credential: str,
    sender: str,
) -> ExportedDocument:
    """Render every email (first page of results) from *sender*.

    Raises :class:`NotFoundError` when the sender has no emails.
    """
    if not sender:
        raise ValidationError("A sender is required")

    ids = await service.list_email_ids(credential, FilterSet(sender=sender))
    if not ids:
        raise NotFoundError(f"No email found from {sender}")

    content = await renderer.render_emails(credential, ids)
    return ExportedDocument(sender_filename(sender), content)


async def export_emails_in_range(
    service: MailQueryService,
    renderer: DocumentRenderer,
    credential: str,
    after: str,
    before: str,
) -> ExportedDocument:
    """Render every email between two ``MMDDYYYY`` dates.

    The document is empty when nothing matched.
    """
    if not after or not before:
        raise ValidationError("Both 'after' and 'before' dates are required")

    filters = FilterSet.from_params(after=after, before=before)
    ids = await service.list_email_ids(credential, filters)
    content = await renderer.render_emails(credential, ids)
    return ExportedDocument(date_range_filename(after, before), content)
