"""Tests for inbox_pdf.errors."""

from __future__ import annotations

from inbox_pdf.errors import (
    ErrorKind,
    InboxPdfError,
    MalformedMessageError,
    NotFoundError,
    RenderError,
    UpstreamError,
    ValidationError,
)


class TestErrorKinds:
    def test_each_error_has_its_kind(self):
        assert ValidationError("x").kind is ErrorKind.VALIDATION
        assert UpstreamError("x").kind is ErrorKind.UPSTREAM
        assert NotFoundError("x").kind is ErrorKind.NOT_FOUND
        assert RenderError("x").kind is ErrorKind.RENDER

    def test_malformed_message_is_upstream(self):
        err = MalformedMessageError("abc", "missing headers array")
        assert err.kind is ErrorKind.UPSTREAM
        assert err.message_id == "abc"
        assert "abc" in err.message

    def test_message_and_cause(self):
        cause = RuntimeError("socket closed")
        err = UpstreamError("Gmail API request failed", status_code=502, cause=cause)
        assert str(err) == "Gmail API request failed"
        assert err.cause is cause
        assert err.status_code == 502
        assert isinstance(err, InboxPdfError)

    def test_repr_names_kind(self):
        assert repr(RenderError("boom")) == "RenderError(kind='render', message='boom')"
