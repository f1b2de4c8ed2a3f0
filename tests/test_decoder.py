"""Tests for Content-Transfer-Encoding decoding."""

from __future__ import annotations

import base64

import pytest

from inbox_mime.core.errors import ContentDecodeError, UnsupportedEncodingError
from inbox_mime.ingestion.decoder import decode_content


def test_quoted_printable_decodes_escapes_and_soft_breaks() -> None:
    assert decode_content(b"caf=C3=A9=\nbar", "quoted-printable") == b"caf\xc3\xa9bar"


def test_quoted_printable_tag_is_case_insensitive() -> None:
    assert decode_content(b"a=3Db", "Quoted-Printable") == b"a=b"


def test_quoted_printable_rejects_invalid_escape() -> None:
    with pytest.raises(ContentDecodeError):
        decode_content(b"bad =ZZ escape", "quoted-printable")


def test_base64_ignores_line_breaks() -> None:
    assert decode_content(b"aGVsbG8g\r\nd29ybGQ=\r\n", "base64") == b"hello world"


def test_base64_rejects_malformed_input() -> None:
    with pytest.raises(ContentDecodeError):
        decode_content(b"not base64!!", "BASE64")


def test_base64_decoding_inverts_standard_encoding() -> None:
    original = bytes(range(256)) * 3
    encoded = base64.encodebytes(original)

    decoded = decode_content(encoded, "base64")

    assert decoded == original
    assert base64.encodebytes(decoded) == encoded


@pytest.mark.parametrize("encoding", ["", "7bit", "8bit", "binary", " 7BIT "])
def test_identity_encodings_pass_through(encoding: str) -> None:
    assert decode_content(b"raw =ZZ bytes\n", encoding) == b"raw =ZZ bytes\n"


def test_unknown_encoding_is_reported() -> None:
    with pytest.raises(UnsupportedEncodingError) as excinfo:
        decode_content(b"begin 644 file", "x-uuencode")

    assert excinfo.value.encoding == "x-uuencode"
