"""Parse raw RFC5322 messages into headers, bodies, attachments and inline files."""

from .core.errors import (
    ContentDecodeError,
    HeaderParseError,
    MailParseError,
    MalformedMediaTypeError,
    MessageFormatError,
    MessageTooLargeError,
    MultipartFormatError,
    NestingTooDeepError,
    UnrecognizedPartTypeError,
    UnsupportedEncodingError,
)
from .core.models import (
    Address,
    Attachment,
    Body,
    Email,
    EmbeddedFile,
    HeaderMap,
    HTMLBody,
    TextBody,
)
from .ingestion import EmailParser, parse

__all__ = [
    "Address",
    "Attachment",
    "Body",
    "ContentDecodeError",
    "Email",
    "EmailParser",
    "EmbeddedFile",
    "HTMLBody",
    "HeaderMap",
    "HeaderParseError",
    "MailParseError",
    "MalformedMediaTypeError",
    "MessageFormatError",
    "MessageTooLargeError",
    "MultipartFormatError",
    "NestingTooDeepError",
    "TextBody",
    "UnrecognizedPartTypeError",
    "UnsupportedEncodingError",
    "parse",
]
