"""Print-ready HTML documents for one or many emails.

Header fields (subject, sender, snippet) are HTML-escaped.  The body is
HTML by nature, so instead of escaping it we strip active content
(scripts, frames, embedded objects, forms, event handlers and
``javascript:`` URLs) before it is interpolated.  Comments, CDATA
sections and other declarations are dropped as well.
"""

from __future__ import annotations

from collections.abc import Sequence
from html import escape

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

from .models import Email

_ACTIVE_TAGS = [
    "script",
    "iframe",
    "frame",
    "frameset",
    "object",
    "embed",
    "applet",
    "form",
    "base",
    "meta",
    "link",
]
# Dropped from bodies: browsers and html.parser disagree on where these end
_MARKUP_NODES = (Comment, CData, Declaration, Doctype, ProcessingInstruction)
_URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction", "xlink:href", "background"})

_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; }
    h1 { color: #222; }
    h2 { color: #333; }
    hr { border: 1px solid #ddd; margin: 20px 0; }
    p { font-size: 14px; }
    .email { margin-bottom: 40px; page-break-after: always; }
    .email:last-child { page-break-after: auto; }
    .email-body { overflow-wrap: anywhere; }
"""


def sanitize_html(body: str) -> str:
    """Remove active content from an email's HTML body."""
    soup = BeautifulSoup(body, "html.parser")

    for tag in soup.find_all(_ACTIVE_TAGS):
        if not tag.decomposed:
            tag.decompose()

    for node in list(soup.descendants):
        if isinstance(node, _MARKUP_NODES):
            node.extract()

    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            name = attr.lower()
            if name.startswith("on"):
                del tag.attrs[attr]
            elif name in _URL_ATTRIBUTES and _is_script_url(tag.attrs[attr]):
                del tag.attrs[attr]

    # A full HTML document is reduced to its <body> content
    if soup.body is not None:
        return soup.body.decode_contents()
    return str(soup)


def _is_script_url(value: object) -> bool:
    text = "".join(str(value).split()).lower()
    return text.startswith(("javascript:", "vbscript:", "data:text/html"))


def _section(email: Email, heading: str) -> str:
    return f"""
      <div class="email">
        <h2>{escape(heading)}</h2>
        <p><b>Subject:</b> {escape(email.subject)}</p>
        <p><b>From:</b> {escape(email.sender)}</p>
        <p><b>Snippet:</b> {escape(email.snippet)}</p>
        <hr>
        <div class="email-body">{sanitize_html(email.body)}</div>
      </div>
    """


def _document(title: str, content: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{escape(title)}</title>
  <style>{_STYLE}</style>
</head>
<body>
{content}
</body>
</html>
"""


def render_email_html(email: Email) -> str:
    """HTML document for a single email."""
    return _document("Email PDF", _section(email, "Email Details"))


def render_emails_html(emails: Sequence[Email]) -> str:
    """HTML document with one page-break separated section per email, in order."""
    sections = "".join(
        _section(email, f"Email {index}") for index, email in enumerate(emails, start=1)
    )
    return _document("Multiple Emails PDF", f"  <h1>Emails Report</h1>\n{sections}")
