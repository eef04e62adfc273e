"""Tests for inbox_pdf.templates."""

from __future__ import annotations

import pytest

from inbox_pdf.templates import render_email_html, render_emails_html, sanitize_html


class TestSanitizeHtml:
    def test_keeps_ordinary_markup(self):
        html = '<p style="color: red">Hello <a href="https://example.com">link</a></p>'
        assert sanitize_html(html) == html

    def test_removes_scripts_and_frames(self):
        cleaned = sanitize_html(
            "<p>ok</p><script>alert(1)</script><iframe src='https://x'></iframe>"
            "<object data='x'></object><form><input></form>"
        )
        assert cleaned == "<p>ok</p>"

    def test_removes_event_handlers(self):
        cleaned = sanitize_html('<img src="cid:logo" onerror="alert(1)" OnLoad="x()">')
        assert "onerror" not in cleaned.lower()
        assert "onload" not in cleaned.lower()
        assert 'src="cid:logo"' in cleaned

    def test_removes_script_urls(self):
        cleaned = sanitize_html('<a href=" JavaScript:alert(1)">x</a><a href="mailto:a@b.c">y</a>')
        assert "javascript" not in cleaned.lower()
        assert 'href="mailto:a@b.c"' in cleaned

    @pytest.mark.parametrize(
        "body",
        [
            "<!--><img src=x onerror=alert(1)>-->",
            "<![CDATA[><img src=x onerror=alert(1)>]]>",
            "<!DOCTYPE html><p>x</p>",
            "<?xml version='1.0'?><p>x</p>",
        ],
    )
    def test_drops_comments_and_declarations(self, body: str):
        cleaned = sanitize_html(body)
        assert "onerror" not in cleaned
        assert "<!" not in cleaned
        assert "<?" not in cleaned

    def test_drops_comment_inside_markup(self):
        assert sanitize_html("<p>a<!-- hidden -->b</p>") == "<p>ab</p>"

    def test_full_document_reduced_to_body(self):
        html = "<html><head><title>t</title></head><body><p>inner</p></body></html>"
        assert sanitize_html(html) == "<p>inner</p>"

    def test_plain_text_passes_through(self):
        assert sanitize_html("No body available") == "No body available"


class TestRenderEmailHtml:
    def test_contains_fields(self, email_factory):
        html = render_email_html(email_factory())
        assert "<b>Subject:</b> Test Email" in html
        assert "<b>From:</b> test@example.com" in html
        assert "<b>Snippet:</b> This is a test email." in html
        assert "<p>Email body content.</p>" in html
        assert "Email Details" in html

    def test_escapes_header_fields(self, email_factory):
        email = email_factory(
            subject="<script>alert('x')</script>",
            sender="Eve <eve@example.com>",
            snippet="a & b",
        )
        html = render_email_html(email)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "Eve &lt;eve@example.com&gt;" in html
        assert "a &amp; b" in html

    def test_sanitizes_body(self, email_factory):
        html = render_email_html(email_factory(body="<p>hi</p><script>steal()</script>"))
        assert "steal()" not in html
        assert "<p>hi</p>" in html


class TestRenderEmailsHtml:
    def test_sections_in_order(self, email_factory):
        first = email_factory(id="1", subject="First subject")
        second = email_factory(id="2", subject="Second subject")
        html = render_emails_html([first, second])

        assert html.index("First subject") < html.index("Second subject")
        assert html.index("Email 1") < html.index("Email 2")
        assert html.count('<div class="email">') == 2
        assert "Emails Report" in html

    def test_sections_break_pages(self, email_factory):
        html = render_emails_html([email_factory(), email_factory()])
        assert "page-break-after: always" in html
