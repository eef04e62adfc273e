"""Configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars.
Values are read once when a config object is built and then passed
explicitly into the service, renderer and engine constructors.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class GmailConfig(BaseSettings):
    """Gmail REST API client settings."""

    model_config = {"env_prefix": "GMAIL_"}

    base_url: str = Field(
        default="https://gmail.googleapis.com/gmail/v1",
        description="Base URL of the Gmail REST API",
    )
    user_id: str = Field(
        default="me",
        description="Mailbox owner; 'me' is the user the token belongs to",
    )
    page_size: int = Field(
        default=20,
        ge=1,
        le=500,
        description="maxResults for the single list request (no further pages are fetched)",
    )
    timeout_seconds: float = Field(default=30.0, description="HTTP request timeout")


class RendererConfig(BaseSettings):
    """Headless Chromium and PDF layout settings."""

    model_config = {"env_prefix": "RENDERER_"}

    page_format: str = Field(default="A4", description="PDF paper format")
    margin_top: str = Field(default="20mm", description="Top page margin")
    margin_bottom: str = Field(default="20mm", description="Bottom page margin")
    margin_left: str = Field(default="10mm", description="Left page margin")
    margin_right: str = Field(default="10mm", description="Right page margin")
    print_background: bool = Field(
        default=True,
        description="Render CSS background colours and images",
    )
    headless: bool = Field(default=True, description="Launch Chromium without a window")
    launch_args: list[str] = Field(
        default_factory=lambda: ["--disable-gpu", "--disable-dev-shm-usage"],
        description="Extra Chromium command-line flags",
    )
    content_timeout_ms: float = Field(
        default=30_000,
        description="Timeout for loading HTML into a page",
    )
    max_concurrent_pages: int = Field(
        default=4,
        ge=1,
        description="Upper bound on pages open at once in the shared browser",
    )

    @property
    def margins(self) -> dict[str, str]:
        return {
            "top": self.margin_top,
            "bottom": self.margin_bottom,
            "left": self.margin_left,
            "right": self.margin_right,
        }


class LoggingConfig(BaseSettings):
    """Log output settings."""

    model_config = {"env_prefix": "LOG_"}

    format: Literal["json", "console"] = Field(
        default="json",
        description="Renderer for log lines: JSON for production, console for humans",
    )
    level: str = Field(default="INFO", description="Root log level")


class InboxPdfConfig(BaseSettings):
    """Root configuration.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "INBOX_PDF_"}

    token: SecretStr | None = Field(
        default=None,
        description="OAuth bearer token used by the command-line front end",
    )

    gmail: GmailConfig = Field(default_factory=GmailConfig)
    renderer: RendererConfig = Field(default_factory=RendererConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
