"""Shared test fixtures for the inbox_pdf test suite."""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from inbox_pdf.config import GmailConfig, RendererConfig
from inbox_pdf.models import Email

GMAIL_BASE_URL = "https://gmail.test/gmail/v1"
MESSAGES_URL = f"{GMAIL_BASE_URL}/users/me/messages"
TOKEN = "test-access-token"


@pytest.fixture
def token() -> str:
    return TOKEN


@pytest.fixture
def gmail_config() -> GmailConfig:
    return GmailConfig(base_url=GMAIL_BASE_URL, page_size=20, timeout_seconds=5.0)


@pytest.fixture
def renderer_config() -> RendererConfig:
    return RendererConfig(max_concurrent_pages=2)


# ------------------------------------------------------------------
# Gmail message resources
# ------------------------------------------------------------------


def encode_body(text: str, *, padded: bool = False) -> str:
    """Encode like the Gmail API does (base64url, usually unpadded)."""
    encoded = base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")
    return encoded if padded else encoded.rstrip("=")


@pytest.fixture
def gmail_message_factory():
    """Factory for ``users.messages.get`` (format=full) responses."""

    def _make(
        message_id: str = "1",
        *,
        subject: str | None = "Test Email",
        sender: str | None = "test@example.com",
        snippet: str | None = "This is a test email.",
        html: str | None = "<p>Test Email Body</p>",
    ) -> dict:
        headers = [{"name": "Date", "value": "Mon, 14 Apr 2025 10:00:00 GMT"}]
        if sender is not None:
            headers.append({"name": "From", "value": sender})
        if subject is not None:
            headers.append({"name": "Subject", "value": subject})

        parts = [{"partId": "0", "mimeType": "text/plain", "body": {"data": encode_body("plain")}}]
        if html is not None:
            parts.append({"partId": "1", "mimeType": "text/html", "body": {"data": encode_body(html)}})

        message = {
            "id": message_id,
            "threadId": f"t-{message_id}",
            "payload": {
                "mimeType": "multipart/alternative",
                "headers": headers,
                "parts": parts,
                "body": {"size": 0},
            },
        }
        if snippet is not None:
            message["snippet"] = snippet
        return message

    return _make


@pytest.fixture
def email_factory():
    """Factory to create Email instances with overrides."""

    def _make(**overrides) -> Email:
        defaults = dict(
            id="email-1",
            subject="Test Email",
            sender="test@example.com",
            snippet="This is a test email.",
            body="<p>Email body content.</p>",
        )
        defaults.update(overrides)
        return Email(**defaults)

    return _make


# ------------------------------------------------------------------
# Playwright doubles
# ------------------------------------------------------------------


@pytest.fixture
def mock_page() -> AsyncMock:
    page = AsyncMock()
    page.set_content = AsyncMock()
    page.pdf = AsyncMock(return_value=b"%PDF-1.4 fake")
    page.close = AsyncMock()
    return page


@pytest.fixture
def mock_browser(mock_page: AsyncMock) -> AsyncMock:
    browser = AsyncMock()
    browser.is_connected = MagicMock(return_value=True)
    browser.new_page = AsyncMock(return_value=mock_page)
    browser.close = AsyncMock()
    return browser


@pytest.fixture
def mock_playwright(mock_browser: AsyncMock) -> AsyncMock:
    playwright = AsyncMock()
    playwright.chromium.launch = AsyncMock(return_value=mock_browser)
    playwright.stop = AsyncMock()
    return playwright


@pytest.fixture
def patch_playwright(monkeypatch, mock_playwright: AsyncMock) -> MagicMock:
    """Replace ``async_playwright()`` in the engine module.

    Returns the patched factory so tests can count process starts.
    """
    context_manager = MagicMock()
    context_manager.start = AsyncMock(return_value=mock_playwright)
    factory = MagicMock(return_value=context_manager)
    monkeypatch.setattr("inbox_pdf.engine.async_playwright", factory)
    return factory


@pytest.fixture
def mock_engine() -> AsyncMock:
    """A BrowserEngine stand-in that records the HTML it was given."""
    engine = AsyncMock()
    engine.render_pdf = AsyncMock(return_value=b"%PDF-1.4 fake")
    return engine
