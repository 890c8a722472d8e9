"""Tests for request metadata and result envelopes."""

from starlette.datastructures import Headers

from resend_uvx_mcp.models import RequestMetadata, ResultEnvelope


class TestRequestMetadata:
    def test_lookup_is_case_insensitive(self):
        metadata = RequestMetadata({"X-API-Key": "k1"})
        assert metadata.first("x-api-key") == "k1"
        assert "X-Api-Key" in metadata

    def test_first_of_multi_valued_header(self):
        metadata = RequestMetadata({"x-api-key": ["k1", "k2"]})
        assert metadata.first("x-api-key") == "k1"

    def test_absent_and_empty_values(self):
        metadata = RequestMetadata({"x-api-key": None, "x-resend-api-key": [], "authorization": ""})
        assert metadata.first("x-api-key") is None
        assert metadata.first("x-resend-api-key") is None
        assert metadata.first("authorization") is None
        assert metadata.first("missing") is None

    def test_from_http_headers_folds_repeats(self):
        headers = Headers(raw=[(b"x-api-key", b"k1"), (b"x-api-key", b"k2"), (b"accept", b"*/*")])
        metadata = RequestMetadata.from_pairs(headers.items())

        assert metadata.get("x-api-key") == ["k1", "k2"]
        assert metadata.get("accept") == "*/*"

    def test_repr_hides_values(self):
        metadata = RequestMetadata({"authorization": "Bearer secret"})
        assert "secret" not in repr(metadata)


class TestResultEnvelope:
    def test_text_is_success(self):
        envelope = ResultEnvelope.text("ok")
        assert envelope.is_error is False
        assert envelope.first_text == "ok"
        assert envelope.content[0].type == "text"

    def test_error_sets_flag(self):
        envelope = ResultEnvelope.error("nope")
        assert envelope.is_error is True
        assert envelope.first_text == "nope"

    def test_empty_envelope_has_no_text(self):
        assert ResultEnvelope().first_text is None
