"""Recursive resolution of multipart/mixed, alternative and related trees."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..core.config import ParserSettings
from ..core.errors import NestingTooDeepError, UnrecognizedPartTypeError
from ..core.models import Attachment, EmbeddedFile, HTMLBody, TextBody
from .headers import decode_mime_sentence
from .multipart import MultipartReader, Part

LOGGER = logging.getLogger(__name__)

CONTENT_TYPE_TEXT_PLAIN = "text/plain"
CONTENT_TYPE_TEXT_HTML = "text/html"
CONTENT_TYPE_TEXT_CALENDAR = "text/calendar"
CONTENT_TYPE_TEXT_EXTENSION = "text/x-"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"


class ContainerKind(str, Enum):
    """Multipart container semantics understood by the resolver."""

    MIXED = "mixed"
    ALTERNATIVE = "alternative"
    RELATED = "related"

    @property
    def content_type(self) -> str:
        return f"multipart/{self.value}"


CONTAINER_KINDS = {kind.content_type: kind for kind in ContainerKind}


@dataclass(frozen=True, slots=True)
class _ContainerRules:
    # Disposition attachments and application/octet-stream become Attachments.
    collects_attachments: bool
    # Containers that may be entered from this one.
    enters: frozenset[ContainerKind]
    # text/x-* leaves without a transfer encoding are dropped.
    skips_text_extensions: bool


_RULES = {
    ContainerKind.MIXED: _ContainerRules(
        collects_attachments=True,
        enters=frozenset(
            {ContainerKind.ALTERNATIVE, ContainerKind.RELATED, ContainerKind.MIXED}
        ),
        skips_text_extensions=False,
    ),
    ContainerKind.ALTERNATIVE: _ContainerRules(
        collects_attachments=False,
        enters=frozenset({ContainerKind.RELATED, ContainerKind.MIXED}),
        skips_text_extensions=True,
    ),
    ContainerKind.RELATED: _ContainerRules(
        collects_attachments=False,
        enters=frozenset({ContainerKind.ALTERNATIVE}),
        skips_text_extensions=True,
    ),
}


def trim_newline(text: str) -> str:
    """Remove a single trailing ``\\n`` or ``\\r\\n`` from ``text``."""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


@dataclass(slots=True)
class Resolution:
    """Bodies and files collected from one container and its descendants."""

    text_body: str = ""
    html_body: str = ""
    attachments: list[Attachment] = field(default_factory=list)
    embedded_files: list[EmbeddedFile] = field(default_factory=list)
    text_bodies: list[TextBody] = field(default_factory=list)
    html_bodies: list[HTMLBody] = field(default_factory=list)

    def merge(self, other: Resolution) -> None:
        """Append every channel of ``other`` after the ones collected so far."""
        self.text_body += other.text_body
        self.html_body += other.html_body
        self.attachments.extend(other.attachments)
        self.embedded_files.extend(other.embedded_files)
        self.text_bodies.extend(other.text_bodies)
        self.html_bodies.extend(other.html_bodies)


def decode_attachment(part: Part) -> Attachment:
    """Build an :class:`Attachment` from a part."""
    content_type = part.header.get("Content-Type").split(";", 1)[0].strip()
    return Attachment(
        filename=part.attachment_filename(),
        content_type=content_type,
        data=part.decoded(),
    )


def decode_embedded_file(part: Part) -> EmbeddedFile:
    """Build an :class:`EmbeddedFile` keyed by the part's Content-Id."""
    cid = decode_mime_sentence(part.header.get("Content-Id"))
    return EmbeddedFile(
        cid=cid.strip("<>"),
        content_type=part.header.get("Content-Type"),
        data=part.decoded(),
    )


class MultipartResolver:
    """Walk a multipart tree depth-first, classifying and decoding its leaves."""

    def __init__(self, settings: ParserSettings | None = None) -> None:
        self._settings = settings or ParserSettings()

    def resolve(
        self, body: bytes, boundary: str, kind: ContainerKind, depth: int = 0
    ) -> Resolution:
        """Resolve the container ``kind`` delimited by ``boundary``.

        ``depth`` counts the multipart/mixed containers enclosing the parts
        read here, this one included when ``kind`` is ``MIXED``.
        """
        limit = self._settings.max_mixed_depth
        if kind is ContainerKind.MIXED and depth > limit:
            raise NestingTooDeepError(depth, limit)

        LOGGER.debug("Resolving %s at mixed depth %d", kind.content_type, depth)
        rules = _RULES[kind]
        resolution = Resolution()
        for raw_part in MultipartReader(body, boundary):
            part = Part.from_raw(raw_part)
            self._classify(part, kind, rules, depth, resolution)
        return resolution

    def _classify(
        self,
        part: Part,
        kind: ContainerKind,
        rules: _ContainerRules,
        depth: int,
        resolution: Resolution,
    ) -> None:
        content_type = part.content_type

        if rules.collects_attachments and part.is_attachment():
            LOGGER.debug("Attachment %r (%s)", part.filename(), content_type)
            resolution.attachments.append(decode_attachment(part))
            return

        if content_type == CONTENT_TYPE_TEXT_PLAIN:
            resolution.text_body += trim_newline(part.raw_text())
            body = part.to_body()
            resolution.text_bodies.append(
                TextBody(body.content_type, body.params, body.data)
            )
        elif content_type == CONTENT_TYPE_TEXT_HTML:
            resolution.html_body += trim_newline(part.raw_text())
            body = part.to_body()
            resolution.html_bodies.append(
                HTMLBody(body.content_type, body.params, body.data)
            )
        elif content_type == CONTENT_TYPE_TEXT_CALENDAR:
            resolution.embedded_files.append(decode_embedded_file(part))
        elif CONTAINER_KINDS.get(content_type) in rules.enters:
            nested_kind = CONTAINER_KINDS[content_type]
            nested_depth = depth + 1 if nested_kind is ContainerKind.MIXED else depth
            nested = self.resolve(
                part.raw, part.params.get("boundary", ""), nested_kind, nested_depth
            )
            resolution.merge(nested)
        elif rules.collects_attachments and content_type == CONTENT_TYPE_OCTET_STREAM:
            resolution.attachments.append(decode_attachment(part))
        elif part.transfer_encoding:
            LOGGER.debug("Embedded file %s", content_type)
            resolution.embedded_files.append(decode_embedded_file(part))
        elif rules.skips_text_extensions and content_type.startswith(
            CONTENT_TYPE_TEXT_EXTENSION
        ):
            LOGGER.debug("Skipping %s inside %s", content_type, kind.content_type)
        else:
            raise UnrecognizedPartTypeError(kind.value, content_type)


__all__ = [
    "CONTAINER_KINDS",
    "ContainerKind",
    "MultipartResolver",
    "Resolution",
    "decode_attachment",
    "decode_embedded_file",
    "trim_newline",
]
