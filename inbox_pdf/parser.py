"""Gmail message resource -> :class:`Email`.

Only the fields we render are extracted: Subject and From headers, the
snippet, and the first ``text/html`` part.  Plain-text parts are never
used as a fallback body.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterator
from typing import Any

import structlog

from .errors import MalformedMessageError
from .models import DEFAULT_BODY, DEFAULT_SENDER, DEFAULT_SNIPPET, DEFAULT_SUBJECT, Email

logger = structlog.get_logger()

HTML_MIME_TYPE = "text/html"


def parse_message(message_id: str, data: dict[str, Any]) -> Email:
    """Normalize a ``users.messages.get`` response (``format=full``).

    Raises :class:`MalformedMessageError` when the payload has no
    ``headers`` array.
    """
    payload = data.get("payload")
    if not isinstance(payload, dict):
        raise MalformedMessageError(message_id, "missing payload")

    headers = payload.get("headers")
    if not isinstance(headers, list):
        raise MalformedMessageError(message_id, "missing headers array")

    return Email(
        id=message_id,
        subject=_header(headers, "Subject") or DEFAULT_SUBJECT,
        sender=_header(headers, "From") or DEFAULT_SENDER,
        snippet=data.get("snippet") or DEFAULT_SNIPPET,
        body=extract_html_body(payload) or DEFAULT_BODY,
    )


def extract_html_body(payload: dict[str, Any]) -> str | None:
    """Return the decoded first HTML part of a multipart payload, if any."""
    for part in _walk_parts(payload.get("parts") or []):
        if part.get("mimeType") != HTML_MIME_TYPE:
            continue
        data = (part.get("body") or {}).get("data")
        if not data:
            continue
        try:
            return decode_base64url(data)
        except (binascii.Error, ValueError):
            logger.warning("gmail_html_part_undecodable", part_id=part.get("partId"))
            return None
    return None


def decode_base64url(data: str) -> str:
    """Decode Gmail's base64url transport encoding; padding is optional."""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def _walk_parts(parts: list[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    # Depth-first, document order
    for part in parts:
        yield part
        yield from _walk_parts(part.get("parts") or [])


def _header(headers: list[dict[str, Any]], name: str) -> str | None:
    wanted = name.lower()
    for header in headers:
        if str(header.get("name", "")).lower() == wanted:
            return header.get("value")
    return None
