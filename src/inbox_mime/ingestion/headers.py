"""Typed decoding of RFC5322 header fields."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from email import errors as email_errors
from email import policy
from email.header import decode_header
from email.utils import parsedate_to_datetime
from typing import Any

from ..core.errors import HeaderParseError
from ..core.models import Address, HeaderMap

LOGGER = logging.getLogger(__name__)

_ENCODED_WORD_RE = re.compile(r"=\?[^?\s]+\?[QqBb]\?[^?\s]*\?=")
_ZONE_COMMENT_RE = re.compile(r"\s*\([^()]*\)\s*$")

_DAY = r"(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)"
_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)"
# Optional weekday, then day month year time and a numeric zone.
_DATE_LAYOUT_RE = re.compile(
    rf"(?:{_DAY}, )?\d{{1,2}} {_MONTH} \d{{4}} \d{{2}}:\d{{2}}:\d{{2}} [+-]\d{{4}}",
    re.IGNORECASE,
)


def decode_encoded_word(word: str) -> str:
    """Decode a single RFC2047 ``=?charset?Q|B?text?=`` token.

    Raises :class:`ValueError` when ``word`` is not exactly one well-formed
    encoded word or names an unknown charset.
    """
    if _ENCODED_WORD_RE.fullmatch(word) is None:
        raise ValueError(f"not an encoded word: {word!r}")
    try:
        chunks = decode_header(word)
    except email_errors.HeaderParseError as exc:
        raise ValueError(str(exc)) from exc
    decoded: list[str] = []
    for chunk, charset in chunks:
        if charset is None or isinstance(chunk, str):
            raise ValueError(f"not an encoded word: {word!r}")
        try:
            decoded.append(chunk.decode(charset))
        except LookupError as exc:
            raise ValueError(f"unknown charset {charset!r}") from exc
    return "".join(decoded)


def decode_mime_sentence(value: str) -> str:
    """Decode every space-separated encoded word of a free-text value.

    Words that fail to decode are kept verbatim; each is preceded by a single
    space unless it is the first emitted word. Decoded words are joined
    without a separator.
    """
    result: list[str] = []
    for word in value.split(" "):
        try:
            decoded = decode_encoded_word(word)
        except ValueError:
            decoded = word if not result else f" {word}"
        result.append(decoded)
    return "".join(result)


def decode_header_map(header: HeaderMap) -> HeaderMap:
    """Return a copy of ``header`` with every value run through the decoder."""
    decoded = HeaderMap()
    for name, values in header.items():
        for value in values:
            decoded.add(name, decode_mime_sentence(value))
    return decoded


def _is_blank(value: str) -> bool:
    return value.strip(" \t\r\n") == ""


def _parse_address_list(field: str, value: str) -> list[Address]:
    try:
        header = policy.default.header_factory(field, value)
    except (ValueError, IndexError) as exc:
        raise HeaderParseError(field, str(exc)) from exc
    invalid = [
        defect
        for defect in header.defects
        if isinstance(defect, email_errors.InvalidHeaderDefect)
    ]
    if invalid:
        raise HeaderParseError(field, str(invalid[0]))
    addresses: list[Address] = []
    for address in header.addresses:
        if not address.username or not address.domain:
            raise HeaderParseError(field, f"missing @ in {address.addr_spec!r}")
        addresses.append(
            Address(name=address.display_name, address=address.addr_spec)
        )
    return addresses


class HeaderResolver:
    """Fail-fast resolver turning raw header fields into typed values.

    The first failing field latches :attr:`error`; afterwards every accessor
    returns its zero value without parsing, so a single error surfaces per
    message.
    """

    def __init__(self, header: HeaderMap) -> None:
        self._header = header
        self.error: HeaderParseError | None = None

    def _latch(self, error: HeaderParseError) -> None:
        LOGGER.debug("Header parsing stopped at %s: %s", error.field, error.reason)
        self.error = error

    def address(self, field: str) -> Address | None:
        """Parse a field holding exactly one mailbox."""
        value = self._header.get(field)
        if self.error is not None or _is_blank(value):
            return None
        try:
            addresses = _parse_address_list(field, value)
            if len(addresses) != 1:
                raise HeaderParseError(
                    field, f"expected one address, got {len(addresses)}"
                )
        except HeaderParseError as exc:
            self._latch(exc)
            return None
        return addresses[0]

    def address_list(self, field: str) -> list[Address]:
        """Parse a field holding a comma separated address list."""
        value = self._header.get(field)
        if self.error is not None or _is_blank(value):
            return []
        try:
            return _parse_address_list(field, value)
        except HeaderParseError as exc:
            self._latch(exc)
            return []

    def date(self, field: str) -> datetime | None:
        """Parse a date field against the supported timestamp layouts."""
        value = self._header.get(field).strip()
        if self.error is not None or not value:
            return None
        parsed = _parse_date(_ZONE_COMMENT_RE.sub("", value))
        if parsed is not None:
            return parsed
        self._latch(HeaderParseError(field, f"unparsable date {value!r}"))
        return None

    def message_id(self, field: str) -> str:
        """Return a message id with its angle brackets removed."""
        if self.error is not None:
            return ""
        return _strip_message_id(self._header.get(field))

    def message_id_list(self, field: str) -> list[str]:
        """Return every whitespace separated message id of a field."""
        if self.error is not None:
            return []
        return [
            _strip_message_id(token)
            for token in self._header.get(field).split()
            if token
        ]

    def resolve(self) -> dict[str, Any]:
        """Return keyword arguments for every typed :class:`Email` header field.

        Raises the latched :class:`HeaderParseError` if any field failed.
        """
        fields: dict[str, Any] = {
            "subject": decode_mime_sentence(self._header.get("Subject")),
            "from_": self.address_list("From"),
            "sender": self.address("Sender"),
            "reply_to": self.address_list("Reply-To"),
            "to": self.address_list("To"),
            "cc": self.address_list("Cc"),
            "bcc": self.address_list("Bcc"),
            "date": self.date("Date"),
            "resent_from": self.address_list("Resent-From"),
            "resent_sender": self.address("Resent-Sender"),
            "resent_to": self.address_list("Resent-To"),
            "resent_cc": self.address_list("Resent-Cc"),
            "resent_bcc": self.address_list("Resent-Bcc"),
            "resent_message_id": self.message_id("Resent-Message-Id"),
            "message_id": self.message_id("Message-Id"),
            "in_reply_to": self.message_id_list("In-Reply-To"),
            "references": self.message_id_list("References"),
            "resent_date": self.date("Resent-Date"),
        }
        if self.error is not None:
            raise self.error
        fields["header"] = decode_header_map(self._header)
        return fields


def _parse_date(value: str) -> datetime | None:
    if _DATE_LAYOUT_RE.fullmatch(value) is None:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    # "-0000" comes back naive.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _strip_message_id(value: str) -> str:
    return value.strip("<> \t\r\n")


__all__ = [
    "HeaderResolver",
    "decode_encoded_word",
    "decode_header_map",
    "decode_mime_sentence",
]
