"""Tests for the boundary reader and the part wrapper."""

from __future__ import annotations

import pytest

from inbox_mime.core.errors import MalformedMediaTypeError, MultipartFormatError
from inbox_mime.core.models import HeaderMap
from inbox_mime.ingestion.multipart import MultipartReader, Part, RawPart

BODY = (
    b"This is the preamble.\n"
    b"--frontier\n"
    b"Content-Type: text/plain\n"
    b"\n"
    b"hello\n"
    b"--frontier  \n"
    b"Content-Type: text/html\n"
    b"\n"
    b"<p>hi</p>\n"
    b"\n"
    b"--frontier--\n"
    b"epilogue\n"
)


def test_reader_yields_parts_between_delimiters() -> None:
    parts = list(MultipartReader(BODY, "frontier"))

    assert [part.header.get("Content-Type") for part in parts] == [
        "text/plain",
        "text/html",
    ]
    assert parts[0].body == b"hello"
    assert parts[1].body == b"<p>hi</p>\n"


def test_reader_strips_crlf_before_delimiter() -> None:
    body = b"--b\r\nContent-Type: text/plain\r\n\r\nline\r\n--b--\r\n"

    part = MultipartReader(body, "b").next_part()

    assert part is not None
    assert part.body == b"line"


def test_reader_returns_none_after_closing_delimiter() -> None:
    reader = MultipartReader(BODY, "frontier")
    reader.next_part()
    reader.next_part()

    assert reader.next_part() is None
    assert reader.next_part() is None


def test_reader_accepts_parts_without_headers() -> None:
    part = MultipartReader(b"--b\n\nbare body\n--b--", "b").next_part()

    assert part is not None
    assert len(part.header) == 0
    assert part.body == b"bare body"


def test_reader_requires_boundary() -> None:
    with pytest.raises(MultipartFormatError):
        MultipartReader(BODY, "")


def test_reader_requires_opening_delimiter() -> None:
    reader = MultipartReader(b"no delimiters here\n", "frontier")

    with pytest.raises(MultipartFormatError):
        reader.next_part()


def test_reader_requires_closing_delimiter() -> None:
    reader = MultipartReader(b"--b\nContent-Type: text/plain\n\ntruncated\n", "b")

    with pytest.raises(MultipartFormatError):
        reader.next_part()


def _raw_part(body: bytes, **headers: str) -> RawPart:
    return RawPart(
        header=HeaderMap(
            (name.replace("_", "-"), value) for name, value in headers.items()
        ),
        body=body,
    )


def test_part_parses_media_headers() -> None:
    part = Part.from_raw(
        _raw_part(
            b"aGVsbG8=",
            Content_Type='text/plain; charset="utf-8"',
            Content_Disposition='ATTACHMENT; filename="a.txt"',
            Content_Transfer_Encoding=" base64 ",
        )
    )

    assert part.content_type == "text/plain"
    assert part.params == {"charset": "utf-8"}
    assert part.disposition == "attachment"
    assert part.filename() == "a.txt"
    assert part.transfer_encoding == "base64"
    assert part.is_attachment()
    assert part.raw_text() == "aGVsbG8="

    body = part.to_body()
    assert body.content_type == "text/plain"
    assert body.params == {"charset": "utf-8"}
    assert body.data == b"hello"


def test_part_without_disposition_has_no_filename() -> None:
    part = Part.from_raw(_raw_part(b"x", Content_Type="image/png"))

    assert part.disposition == ""
    assert part.filename() == ""
    assert not part.is_attachment()


def test_part_filename_falls_back_to_name_parameter() -> None:
    part = Part.from_raw(
        _raw_part(b"x", Content_Type='application/octet-stream; name="x.bin"')
    )

    assert part.attachment_filename() == "x.bin"


def test_part_without_content_type_is_malformed() -> None:
    with pytest.raises(MalformedMediaTypeError):
        Part.from_raw(_raw_part(b"x"))


def test_part_with_malformed_disposition_is_malformed() -> None:
    with pytest.raises(MalformedMediaTypeError):
        Part.from_raw(
            _raw_part(b"x", Content_Type="text/plain", Content_Disposition="@@")
        )
