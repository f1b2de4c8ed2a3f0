"""Entry point turning raw RFC5322 messages into :class:`Email` values."""

from __future__ import annotations

import logging
from typing import BinaryIO

from ..core.config import ParserSettings, load_app_settings
from ..core.errors import MessageTooLargeError
from ..core.models import Body, Email, HTMLBody, TextBody
from .decoder import decode_content
from .headers import HeaderResolver
from .mediatype import parse_media_type
from .message import read_message
from .resolver import (
    CONTENT_TYPE_TEXT_HTML,
    CONTENT_TYPE_TEXT_PLAIN,
    ContainerKind,
    MultipartResolver,
    Resolution,
    trim_newline,
)

LOGGER = logging.getLogger(__name__)

CONTENT_TYPE_MULTIPART_SIGNED = "multipart/signed"

# Outer content-type -> (container, mixed depth of its parts).
_ROUTES = {
    CONTENT_TYPE_MULTIPART_SIGNED: (ContainerKind.MIXED, 1),
    ContainerKind.MIXED.content_type: (ContainerKind.MIXED, 1),
    ContainerKind.ALTERNATIVE.content_type: (ContainerKind.ALTERNATIVE, 0),
    ContainerKind.RELATED.content_type: (ContainerKind.RELATED, 0),
}


def parse_content_type(value: str) -> tuple[str, dict[str, str]]:
    """Parse the outer Content-Type; an empty value means ``text/plain``."""
    if value == "":
        return CONTENT_TYPE_TEXT_PLAIN, {}
    return parse_media_type(value)


class EmailParser:
    """Convert raw email payloads into structured :class:`Email` values."""

    def __init__(self, settings: ParserSettings | None = None) -> None:
        """Prepare the multipart resolver with the configured bounds.

        Without explicit ``settings`` the parser section of
        :func:`~inbox_mime.core.config.load_app_settings` applies.
        """
        self._settings = settings or load_app_settings().parser
        self._resolver = MultipartResolver(self._settings)

    def parse(self, payload: bytes | bytearray | str | BinaryIO) -> Email:
        """Parse a complete message.

        Any failure raises a :class:`~inbox_mime.core.errors.MailParseError`
        subclass; no partially populated :class:`Email` is returned.
        """
        data = self._read_payload(payload)
        header, body = read_message(data)
        fields = HeaderResolver(header).resolve()

        content_type_header = header.get("Content-Type")
        content_type, params = parse_content_type(content_type_header)
        transfer_encoding = header.get("Content-Transfer-Encoding")
        LOGGER.debug("Parsing %d byte message of type %s", len(data), content_type)

        email = Email(content_type=content_type_header, **fields)

        route = _ROUTES.get(content_type)
        if route is not None:
            kind, depth = route
            resolution = self._resolver.resolve(
                body, params.get("boundary", ""), kind, depth
            )
            _apply_resolution(email, resolution)
        elif content_type == CONTENT_TYPE_TEXT_PLAIN:
            email.text_body = trim_newline(_raw_text(body, params))
            email.text_bodies = [
                TextBody(content_type, params, decode_content(body, transfer_encoding))
            ]
        elif content_type == CONTENT_TYPE_TEXT_HTML:
            email.html_body = trim_newline(_raw_text(body, params))
            email.html_bodies = [
                HTMLBody(content_type, params, decode_content(body, transfer_encoding))
            ]
        else:
            email.content = decode_content(body, transfer_encoding)

        LOGGER.debug(
            "Parsed message %r: %d text, %d html, %d attachments, %d embedded",
            email.message_id,
            len(email.text_bodies),
            len(email.html_bodies),
            len(email.attachments),
            len(email.embedded_files),
        )
        return email

    def _read_payload(self, payload: bytes | bytearray | str | BinaryIO) -> bytes:
        limit = self._settings.max_message_bytes
        if isinstance(payload, str):
            data = payload.encode("utf-8")
        elif isinstance(payload, (bytes, bytearray)):
            data = bytes(payload)
        else:
            # Read one byte past the limit to detect oversize streams.
            data = payload.read() if limit is None else payload.read(limit + 1)
        if limit is not None and len(data) > limit:
            raise MessageTooLargeError(len(data), limit)
        return data


def _raw_text(body: bytes, params: dict[str, str]) -> str:
    return Body(CONTENT_TYPE_TEXT_PLAIN, params, body).text()


def _apply_resolution(email: Email, resolution: Resolution) -> None:
    email.text_body = resolution.text_body
    email.html_body = resolution.html_body
    email.attachments = resolution.attachments
    email.embedded_files = resolution.embedded_files
    email.text_bodies = resolution.text_bodies
    email.html_bodies = resolution.html_bodies


def parse(
    payload: bytes | bytearray | str | BinaryIO,
    settings: ParserSettings | None = None,
) -> Email:
    """Parse ``payload`` with a one-off :class:`EmailParser`."""
    return EmailParser(settings).parse(payload)


__all__ = ["EmailParser", "parse", "parse_content_type"]
