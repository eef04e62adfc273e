"""Data models for mail queries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SUBJECT = "No Subject"
DEFAULT_SENDER = "Unknown Sender"
DEFAULT_SNIPPET = "No preview available"
DEFAULT_BODY = "No body available"


class FilterSet(BaseModel):
    """Criteria narrowing which messages to retrieve.

    When ``id`` is set every other field is ignored and exactly one
    message is fetched.  ``after`` and ``before`` are Unix timestamps in
    whole seconds; use :meth:`from_params` to build a filter set from
    human ``MMDDYYYY`` dates.
    """

    model_config = ConfigDict(frozen=True)

    sender: str | None = Field(default=None, description="Match the From header (from:)")
    recipient: str | None = Field(default=None, description="Match the To header (to:)")
    after: int | None = Field(default=None, description="Only messages after this Unix time")
    before: int | None = Field(default=None, description="Only messages before this Unix time")
    id: str | None = Field(default=None, description="Fetch exactly this message")

    @classmethod
    def from_params(
        cls,
        *,
        sender: str | None = None,
        recipient: str | None = None,
        after: str | None = None,
        before: str | None = None,
        id: str | None = None,
    ) -> FilterSet:
        """Build a filter set from caller-facing parameters.

        Raises :class:`~inbox_pdf.errors.ValidationError` for dates that
        are not in ``MMDDYYYY`` form.
        """
        from .query import parse_date

        return cls(
            sender=sender or None,
            recipient=recipient or None,
            after=parse_date(after) if after else None,
            before=parse_date(before) if before else None,
            id=id or None,
        )


class Email(BaseModel):
    """Normalized mailbox message.

    ``body`` holds the HTML part of the message as delivered by the
    provider; it is sanitized when rendered.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Provider-assigned message identifier")
    subject: str = Field(default=DEFAULT_SUBJECT)
    sender: str = Field(default=DEFAULT_SENDER, alias="from")
    snippet: str = Field(default=DEFAULT_SNIPPET)
    body: str = Field(default=DEFAULT_BODY)
