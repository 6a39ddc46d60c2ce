"""
Unit Tests for HMAC Request Signing
===================================
Signature construction, header sources, payload classification and the
verifier's fail-closed behavior.
"""

import hashlib
import hmac
from unittest.mock import patch

import pytest

from sitegate.request_signing import (
    ChainedHeaderSource,
    EnvironHeaderSource,
    HmacRequestVerifier,
    JsonPayload,
    MappingHeaderSource,
    MultipartPayload,
    SignedRequest,
    VerifyFailure,
    build_signing_message,
    check_timestamp_skew,
    classify_payload,
    compute_signature,
    create_signed_headers,
    create_signed_upload_headers,
    is_multipart,
    parse_timestamp,
)

NOW = 1_700_000_000
BODY = b'{"title": "Hello", "content": "<p>World</p>"}'


def sign(key: str, message: bytes) -> str:
    return hmac.new(key.encode(), message, hashlib.sha256).hexdigest()


def json_request(signature, timestamp, body=BODY, content_type="application/json"):
    return SignedRequest(
        signature=signature,
        timestamp=timestamp,
        content_type=content_type,
        payload=JsonPayload(body),
    )


def upload_request(signature, timestamp, email="owner@example.com", filename="photo.jpg"):
    return SignedRequest(
        signature=signature,
        timestamp=timestamp,
        content_type="multipart/form-data; boundary=xyz",
        payload=MultipartPayload(email=email, filename=filename),
    )


@pytest.fixture
def verifier(api_key):
    return HmacRequestVerifier(api_key, clock=lambda: NOW)


class TestSignature:
    """Tests for signing message construction and HMAC."""

    def test_json_message(self):
        assert build_signing_message("123", JsonPayload(b'{"a":1}')) == b'123.{"a":1}'

    def test_multipart_message(self):
        payload = MultipartPayload(email="a@b.c", filename="x.png")
        assert build_signing_message("123", payload) == b"123.a@b.c.x.png"

    def test_compute_signature_matches_hmac_sha256(self, api_key):
        signature = compute_signature(api_key, b"123.body")

        assert signature == sign(api_key, b"123.body")
        assert len(signature) == 64

    def test_parse_timestamp(self):
        assert parse_timestamp("1700000000") == 1700000000
        assert parse_timestamp(" 42 ") == 42
        assert parse_timestamp("abc") is None
        assert parse_timestamp("-5") is None
        assert parse_timestamp("1.5") is None
        assert parse_timestamp(None) is None
        assert parse_timestamp("9" * 21) is None
        assert parse_timestamp("9" * 5000) is None

    def test_check_timestamp_skew_boundaries(self):
        assert check_timestamp_skew(NOW - 300, now=NOW) is True
        assert check_timestamp_skew(NOW - 301, now=NOW) is False
        assert check_timestamp_skew(NOW + 300, now=NOW) is True
        assert check_timestamp_skew(NOW + 301, now=NOW) is False


class TestHeaderSources:
    """Tests for header lookup and the fallback chain."""

    def test_environ_source(self):
        source = EnvironHeaderSource({"HTTP_X_SIGNATURE": "abc"})
        assert source.get("X-Signature") == "abc"
        assert source.get("X-Timestamp") is None

    def test_mapping_source_is_case_insensitive(self):
        source = MappingHeaderSource({"x-timestamp": "123"})
        assert source.get("X-Timestamp") == "123"

    def test_chain_first_non_empty_wins(self):
        source = ChainedHeaderSource(
            EnvironHeaderSource({"HTTP_X_SIGNATURE": ""}),
            MappingHeaderSource({"X-SIGNATURE": "from-headers"}),
            MappingHeaderSource({"x-signature": "from-server"}),
        )
        assert source.get("X-Signature") == "from-headers"

    def test_chain_falls_through_to_last_source(self):
        source = ChainedHeaderSource(
            EnvironHeaderSource({}),
            MappingHeaderSource({}),
            MappingHeaderSource({"X-Timestamp": "99"}),
        )
        assert source.get("x-timestamp") == "99"
        assert source.get("X-Signature") is None

    def test_create_signed_headers(self, api_key):
        headers = create_signed_headers(api_key, BODY, timestamp=NOW)

        assert headers["X-Timestamp"] == str(NOW)
        assert headers["X-Signature"] == sign(api_key, f"{NOW}.".encode() + BODY)

    def test_create_signed_upload_headers(self, api_key):
        headers = create_signed_upload_headers(api_key, "a@b.c", "x.png", timestamp=NOW)
        assert headers["X-Signature"] == sign(api_key, f"{NOW}.a@b.c.x.png".encode())


class TestClassification:
    """Tests for picking the signing payload shape."""

    @pytest.mark.parametrize("content_type", [
        "multipart/form-data; boundary=abc",
        "MULTIPART/FORM-DATA",
        "text/plain; multipart/form-data",
    ])
    def test_multipart_detection(self, content_type):
        assert is_multipart(content_type) is True

    @pytest.mark.parametrize("content_type", ["application/json", "", None])
    def test_everything_else_is_json(self, content_type):
        assert is_multipart(content_type) is False
        assert classify_payload(content_type, body="{}") == JsonPayload(b"{}")

    def test_multipart_payload_ignores_body(self):
        payload = classify_payload("multipart/form-data", body=b"x", email="a", filename="b")
        assert payload == MultipartPayload(email="a", filename="b")

    def test_missing_body_is_empty(self):
        assert classify_payload("application/json") == JsonPayload(b"")


class TestHmacRequestVerifier:
    """Tests for the verifier."""

    def test_valid_json_request(self, verifier, api_key):
        signature = sign(api_key, f"{NOW}.".encode() + BODY)
        assert verifier.verify(json_request(signature, str(NOW))) is True

    def test_flipping_a_body_byte_fails(self, verifier, api_key):
        signature = sign(api_key, f"{NOW}.".encode() + BODY)
        tampered = bytearray(BODY)
        tampered[5] ^= 0x01

        assert verifier.verify(json_request(signature, str(NOW), body=bytes(tampered))) is False

    def test_flipping_a_signature_char_fails(self, verifier, api_key):
        signature = sign(api_key, f"{NOW}.".encode() + BODY)
        flipped = ("0" if signature[0] != "0" else "1") + signature[1:]

        assert verifier.verify(json_request(flipped, str(NOW))) is False

    def test_body_is_not_reserialized(self, verifier, api_key):
        """A semantically equal but re-serialized body must not verify."""
        signature = sign(api_key, f"{NOW}.".encode() + BODY)
        compact = b'{"title":"Hello","content":"<p>World</p>"}'

        assert verifier.verify(json_request(signature, str(NOW), body=compact)) is False

    @pytest.mark.parametrize("age,expected", [
        (0, True),
        (300, True),
        (301, False),
        (-300, True),
        (-301, False),
    ])
    def test_replay_window(self, verifier, api_key, age, expected):
        timestamp = str(NOW - age)
        signature = sign(api_key, f"{timestamp}.".encode() + BODY)

        assert verifier.verify(json_request(signature, timestamp)) is expected

    def test_stale_timestamp_reports_skew(self, verifier, api_key):
        timestamp = str(NOW - 1000)
        signature = sign(api_key, f"{timestamp}.".encode() + BODY)

        result = verifier.check(json_request(signature, timestamp))

        assert result.valid is False
        assert result.failure == VerifyFailure.TIMESTAMP_SKEW

    def test_malformed_timestamp_fails(self, verifier, api_key):
        signature = sign(api_key, b"soon." + BODY)
        result = verifier.check(json_request(signature, "soon"))

        assert result.failure == VerifyFailure.INVALID_TIMESTAMP

    def test_oversized_timestamp_fails(self, verifier):
        result = verifier.check(json_request("a" * 64, "9" * 5000))

        assert result.valid is False
        assert result.failure == VerifyFailure.INVALID_TIMESTAMP

    @pytest.mark.parametrize("signature,timestamp", [
        (None, str(NOW)),
        ("", str(NOW)),
        ("abc", None),
        ("abc", ""),
    ])
    def test_missing_headers_fail(self, verifier, signature, timestamp):
        result = verifier.check(json_request(signature, timestamp))

        assert result.valid is False
        assert result.failure == VerifyFailure.MISSING_HEADERS

    def test_valid_multipart_request(self, verifier, api_key):
        signature = sign(api_key, f"{NOW}.owner@example.com.photo.jpg".encode())
        assert verifier.verify(upload_request(signature, str(NOW))) is True

    @pytest.mark.parametrize("email,filename", [
        ("", "photo.jpg"),
        ("owner@example.com", ""),
        ("", ""),
    ])
    def test_multipart_requires_email_and_filename(self, verifier, api_key, email, filename):
        """Correctly signed but incomplete uploads are rejected."""
        signature = sign(api_key, f"{NOW}.{email}.{filename}".encode())

        result = verifier.check(upload_request(signature, str(NOW), email=email, filename=filename))

        assert result.valid is False
        assert result.failure == VerifyFailure.MISSING_UPLOAD_FIELDS

    def test_multipart_signature_over_wrong_filename_fails(self, verifier, api_key):
        signature = sign(api_key, f"{NOW}.owner@example.com.other.jpg".encode())
        assert verifier.verify(upload_request(signature, str(NOW))) is False

    @pytest.mark.parametrize("missing_key", [None, ""])
    def test_missing_api_key_always_fails(self, missing_key):
        verifier = HmacRequestVerifier(missing_key, clock=lambda: NOW)
        # Signed with the empty key, which must still not pass
        signature = sign("", f"{NOW}.".encode() + BODY)

        result = verifier.check(json_request(signature, str(NOW)))

        assert result.valid is False
        assert result.failure == VerifyFailure.API_KEY_MISSING

    def test_non_ascii_signature_fails_closed(self, verifier):
        assert verifier.verify(json_request("ü" * 64, str(NOW))) is False

    def test_verify_parts(self, verifier, api_key):
        headers = MappingHeaderSource(create_signed_headers(api_key, BODY, timestamp=NOW))

        assert verifier.verify_parts(headers, "application/json", body=BODY) is True
        assert verifier.verify_parts(headers, "application/json", body=b"{}") is False

    def test_verify_parts_multipart(self, verifier, api_key):
        headers = EnvironHeaderSource({
            "HTTP_X_SIGNATURE": sign(api_key, f"{NOW}.a@b.c.x.png".encode()),
            "HTTP_X_TIMESTAMP": str(NOW),
        })

        assert verifier.verify_parts(
            headers, "multipart/form-data; boundary=q", email="a@b.c", filename="x.png"
        ) is True

    def test_comparison_is_constant_time(self, verifier, api_key):
        """Signature comparison must go through hmac.compare_digest."""
        signature = sign(api_key, f"{NOW}.".encode() + BODY)

        with patch("sitegate.request_signing.signature.hmac.compare_digest",
                   wraps=hmac.compare_digest) as compare:
            assert verifier.verify(json_request(signature, str(NOW))) is True

        compare.assert_called_once()
