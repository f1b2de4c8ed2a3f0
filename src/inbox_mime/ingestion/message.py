"""Split raw RFC5322 bytes into a header map and a body."""

from __future__ import annotations

import logging
import re
from email import policy
from email.parser import BytesParser

from ..core.errors import MessageFormatError
from ..core.models import HeaderMap

LOGGER = logging.getLogger(__name__)

_PARSER = BytesParser(policy=policy.default)

# The empty line ending the header section, or a leading one when there is none.
_HEADER_END_RE = re.compile(rb"(?:\A|\n)\r?\n")


def _restore_bytes(value: str) -> bytes:
    # BytesParser decodes header input as ASCII with surrogateescape.
    return value.encode("ascii", errors="surrogateescape")


def unfold_header_value(value: str) -> str:
    """Join folded continuation lines and recover non-ASCII bytes as UTF-8."""
    unfolded = " ".join(
        segment.strip() for segment in value.splitlines() if segment.strip()
    )
    return _restore_bytes(unfolded).decode("utf-8", errors="replace")


def split_message(payload: bytes) -> tuple[bytes, bytes]:
    """Split ``payload`` at the first empty line into header and body bytes.

    A payload without an empty line is all header and has an empty body.
    """
    match = _HEADER_END_RE.search(payload)
    if match is None:
        return payload, b""
    return payload[: match.start()], payload[match.end() :]


def read_message(payload: bytes) -> tuple[HeaderMap, bytes]:
    """Return the raw header fields of ``payload`` and its undecoded body.

    The body is sliced from ``payload`` untouched, so 8bit and binary content
    keep their exact bytes.
    """
    if not payload:
        raise MessageFormatError("empty message")

    head, body = split_message(payload)
    message = _PARSER.parsebytes(head, headersonly=True)
    if message.defects:
        LOGGER.debug("Message header defects: %s", message.defects)

    header = HeaderMap(
        (name, unfold_header_value(value)) for name, value in message.raw_items()
    )
    return header, body


__all__ = ["read_message", "split_message", "unfold_header_value"]
