"""Content-Transfer-Encoding decoders."""

from __future__ import annotations

import base64
import binascii
import quopri
import re

from ..core.errors import ContentDecodeError, UnsupportedEncodingError

IDENTITY_ENCODINGS = frozenset({"", "7bit", "8bit", "binary"})

# "=" must start a hex escape or a soft line break.
_BAD_QP_ESCAPE = re.compile(rb"=(?![0-9A-Fa-f]{2}|[ \t]*(?:\r?\n|$))")


def _decode_quoted_printable(data: bytes) -> bytes:
    bad_escape = _BAD_QP_ESCAPE.search(data)
    if bad_escape is not None:
        snippet = data[bad_escape.start() : bad_escape.start() + 3]
        raise ContentDecodeError(f"quoted-printable: invalid escape {snippet!r}")
    return quopri.decodestring(data)


def _decode_base64(data: bytes) -> bytes:
    compact = data.replace(b"\r", b"").replace(b"\n", b"")
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as exc:
        raise ContentDecodeError(f"base64: {exc}") from exc


def decode_content(data: bytes, encoding: str) -> bytes:
    """Decode ``data`` according to a Content-Transfer-Encoding tag."""
    normalized = encoding.strip().lower()
    if normalized == "quoted-printable":
        return _decode_quoted_printable(data)
    if normalized == "base64":
        return _decode_base64(data)
    if normalized in IDENTITY_ENCODINGS:
        return bytes(data)
    raise UnsupportedEncodingError(encoding)


__all__ = ["IDENTITY_ENCODINGS", "decode_content"]
