"""Boundary-delimited multipart reading and per-part wrappers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from ..core.errors import MultipartFormatError
from ..core.models import Body, HeaderMap
from .decoder import decode_content
from .headers import decode_mime_sentence
from .mediatype import parse_disposition, parse_media_type
from .message import read_message

LOGGER = logging.getLogger(__name__)

_TRANSPORT_PADDING = b" \t\r\n"


def _iter_lines(data: bytes) -> Iterator[bytes]:
    """Yield ``data`` line by line, keeping each line terminator."""
    start = 0
    length = len(data)
    while start < length:
        end = data.find(b"\n", start)
        if end == -1:
            yield data[start:]
            return
        yield data[start : end + 1]
        start = end + 1


def _strip_line_break(chunk: bytes) -> bytes:
    if chunk.endswith(b"\r\n"):
        return chunk[:-2]
    if chunk.endswith(b"\n"):
        return chunk[:-1]
    return chunk


@dataclass(slots=True)
class RawPart:
    """Headers and undecoded body of one multipart segment."""

    header: HeaderMap
    body: bytes


class MultipartReader:
    """Forward-only reader over the parts of a multipart body."""

    def __init__(self, body: bytes, boundary: str) -> None:
        if not boundary:
            raise MultipartFormatError("multipart: boundary is empty")
        self._delimiter = b"--" + boundary.encode("utf-8")
        self._close_delimiter = self._delimiter + b"--"
        self._lines = _iter_lines(body)
        self._started = False
        self._finished = False

    def _classify(self, line: bytes) -> str | None:
        """Return ``"part"`` or ``"close"`` for delimiter lines, else ``None``."""
        if not line.startswith(self._delimiter):
            return None
        stripped = line.rstrip(_TRANSPORT_PADDING)
        if stripped == self._delimiter:
            return "part"
        if stripped == self._close_delimiter:
            return "close"
        return None

    def _skip_preamble(self) -> None:
        for line in self._lines:
            kind = self._classify(line)
            if kind == "part":
                return
            if kind == "close":
                self._finished = True
                return
        raise MultipartFormatError("multipart: opening boundary not found")

    def next_part(self) -> RawPart | None:
        """Return the next part, or ``None`` once the closing delimiter was read.

        Raises :class:`MultipartFormatError` when the body ends before the
        closing delimiter.
        """
        if self._finished:
            return None
        if not self._started:
            self._started = True
            self._skip_preamble()
            if self._finished:
                return None

        chunks: list[bytes] = []
        for line in self._lines:
            kind = self._classify(line)
            if kind is None:
                chunks.append(line)
                continue
            if kind == "close":
                self._finished = True
            if chunks:
                # The line break before a delimiter belongs to the delimiter.
                chunks[-1] = _strip_line_break(chunks[-1])
            return self._build_part(b"".join(chunks))
        raise MultipartFormatError("multipart: closing boundary not found")

    def __iter__(self) -> Iterator[RawPart]:
        while True:
            part = self.next_part()
            if part is None:
                return
            yield part

    @staticmethod
    def _build_part(segment: bytes) -> RawPart:
        if segment.startswith((b"\r\n", b"\n")):
            # No header fields at all.
            return RawPart(header=HeaderMap(), body=_strip_leading_break(segment))
        header, body = read_message(segment) if segment else (HeaderMap(), b"")
        return RawPart(header=header, body=body)


def _strip_leading_break(segment: bytes) -> bytes:
    if segment.startswith(b"\r\n"):
        return segment[2:]
    return segment[1:]


# pylint: disable=too-many-instance-attributes
@dataclass(slots=True)
class Part:
    """One multipart segment with its media headers parsed up front.

    ``raw`` holds the undecoded body so it can be read both as text for the
    aggregated bodies and as input to the transfer decoder.
    """

    header: HeaderMap
    content_type: str
    params: dict[str, str]
    disposition: str
    disposition_params: dict[str, str]
    transfer_encoding: str
    raw: bytes

    @classmethod
    def from_raw(cls, raw_part: RawPart) -> Part:
        """Wrap ``raw_part``, raising ``MalformedMediaTypeError`` on bad headers."""
        header = raw_part.header
        content_type, params = parse_media_type(header.get("Content-Type"))
        disposition, disposition_params = "", {}
        if header.get("Content-Disposition"):
            disposition, disposition_params = parse_disposition(
                header.get("Content-Disposition")
            )
        return cls(
            header=header,
            content_type=content_type,
            params=params,
            disposition=disposition,
            disposition_params=disposition_params,
            transfer_encoding=header.get("Content-Transfer-Encoding").strip(),
            raw=raw_part.body,
        )

    def filename(self) -> str:
        """Return the disposition ``filename`` parameter, or an empty string."""
        return self.disposition_params.get("filename", "")

    def is_attachment(self) -> bool:
        """Tell whether the disposition marks this part as a downloadable file."""
        return bool(self.filename()) or self.disposition.lower() == "attachment"

    def raw_text(self) -> str:
        """Return the undecoded body as text in the part's charset."""
        return Body(self.content_type, self.params, self.raw).text()

    def decoded(self) -> bytes:
        """Return the body with its transfer encoding removed."""
        return decode_content(self.raw, self.transfer_encoding)

    def to_body(self) -> Body:
        """Decode the body into a :class:`Body` carrying this part's media type."""
        return Body(
            content_type=self.content_type,
            params=dict(self.params),
            data=self.decoded(),
        )

    def attachment_filename(self) -> str:
        """Return the MIME-decoded filename, falling back to the ``name`` param."""
        filename = decode_mime_sentence(self.filename())
        if not filename and "name" in self.params:
            filename = decode_mime_sentence(self.params["name"])
        return filename


__all__ = ["MultipartReader", "Part", "RawPart"]
