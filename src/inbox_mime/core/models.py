"""Core domain models produced by the message parser."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime


def canonical_header_name(name: str) -> str:
    """Return ``name`` in canonical MIME form, e.g. ``Content-Id``."""
    return "-".join(segment.capitalize() for segment in name.strip().split("-"))


class HeaderMap:
    """Case-insensitive multi-map of header names to their values."""

    __slots__ = ("_values",)

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        """Build the map from ``(name, value)`` pairs, keeping their order."""
        self._values: dict[str, list[str]] = {}
        for name, value in items:
            self.add(name, value)

    def add(self, name: str, value: str) -> None:
        """Append ``value`` to the values stored under ``name``."""
        self._values.setdefault(canonical_header_name(name), []).append(value)

    def get(self, name: str, default: str = "") -> str:
        """Return the first value stored under ``name``."""
        values = self._values.get(canonical_header_name(name))
        if not values:
            return default
        return values[0]

    def get_all(self, name: str) -> list[str]:
        """Return every value stored under ``name`` in arrival order."""
        return list(self._values.get(canonical_header_name(name), ()))

    def items(self) -> Iterator[tuple[str, list[str]]]:
        """Iterate over canonical names and their value lists."""
        for name, values in self._values.items():
            yield name, list(values)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_header_name(name) in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"HeaderMap({self._values!r})"


@dataclass(slots=True)
class Address:
    """Mailbox with an optional display name."""

    name: str
    address: str

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.address}>"
        return self.address


@dataclass(slots=True)
class Body:
    """Decoded body part together with its media type."""

    content_type: str
    params: dict[str, str]
    data: bytes

    def text(self) -> str:
        """Return ``data`` decoded with the part charset, UTF-8 otherwise."""
        charset = self.params.get("charset") or "utf-8"
        try:
            return self.data.decode(charset, errors="replace")
        except LookupError:
            return self.data.decode("utf-8", errors="replace")


@dataclass(slots=True)
class TextBody(Body):
    """Body taken from a ``text/plain`` part."""


@dataclass(slots=True)
class HTMLBody(Body):
    """Body taken from a ``text/html`` part."""


@dataclass(slots=True)
class Attachment:
    """File attached to a message for download."""

    filename: str
    content_type: str
    data: bytes


@dataclass(slots=True)
class EmbeddedFile:
    """Inline file referenced from the HTML body by content-id."""

    cid: str
    content_type: str
    data: bytes


# pylint: disable=too-many-instance-attributes
@dataclass(slots=True)
class Email:
    """Structured representation of a parsed RFC5322 message."""

    header: HeaderMap = field(default_factory=HeaderMap)

    subject: str = ""
    sender: Address | None = None
    from_: list[Address] = field(default_factory=list)
    reply_to: list[Address] = field(default_factory=list)
    to: list[Address] = field(default_factory=list)
    cc: list[Address] = field(default_factory=list)
    bcc: list[Address] = field(default_factory=list)
    date: datetime | None = None
    message_id: str = ""
    in_reply_to: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)

    resent_from: list[Address] = field(default_factory=list)
    resent_sender: Address | None = None
    resent_to: list[Address] = field(default_factory=list)
    resent_date: datetime | None = None
    resent_cc: list[Address] = field(default_factory=list)
    resent_bcc: list[Address] = field(default_factory=list)
    resent_message_id: str = ""

    content_type: str = ""
    content: bytes | None = None

    html_body: str = ""
    text_body: str = ""

    attachments: list[Attachment] = field(default_factory=list)
    embedded_files: list[EmbeddedFile] = field(default_factory=list)

    html_bodies: list[HTMLBody] = field(default_factory=list)
    text_bodies: list[TextBody] = field(default_factory=list)


__all__ = [
    "Address",
    "Attachment",
    "Body",
    "Email",
    "EmbeddedFile",
    "HTMLBody",
    "HeaderMap",
    "TextBody",
    "canonical_header_name",
]
