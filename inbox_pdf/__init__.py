"""inbox-pdf: query a Gmail mailbox and render selected messages to PDF.

Public API re-exported here for convenience::

    from inbox_pdf import DocumentRenderer, FilterSet, MailQueryService
"""

from .config import GmailConfig, InboxPdfConfig, LoggingConfig, RendererConfig
from .engine import BrowserEngine, get_engine, install_shutdown_hook
from .errors import (
    ErrorKind,
    InboxPdfError,
    MalformedMessageError,
    NotFoundError,
    RenderError,
    UpstreamError,
    ValidationError,
)
from .export import (
    ExportedDocument,
    export_email,
    export_emails_from,
    export_emails_in_range,
)
from .gmail_client import GmailClient
from .logging import setup_logging
from .models import Email, FilterSet
from .query import build_query, parse_date
from .renderer import DocumentRenderer
from .service import MailQueryService

__all__ = [
    "BrowserEngine",
    "DocumentRenderer",
    "Email",
    "ErrorKind",
    "ExportedDocument",
    "FilterSet",
    "GmailClient",
    "GmailConfig",
    "InboxPdfConfig",
    "InboxPdfError",
    "LoggingConfig",
    "MailQueryService",
    "MalformedMessageError",
    "NotFoundError",
    "RenderError",
    "RendererConfig",
    "UpstreamError",
    "ValidationError",
    "build_query",
    "export_email",
    "export_emails_from",
    "export_emails_in_range",
    "get_engine",
    "install_shutdown_hook",
    "parse_date",
    "setup_logging",
]
