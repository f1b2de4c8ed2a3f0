"""Exception hierarchy raised while parsing messages."""

from __future__ import annotations


class MailParseError(RuntimeError):
    """Base class for every failure raised by the message parser."""


class MessageFormatError(MailParseError):
    """Raised when the raw message cannot be split into headers and body."""


class MultipartFormatError(MessageFormatError):
    """Raised when a multipart body is not delimited by its boundary."""


class MessageTooLargeError(MailParseError):
    """Raised when a message exceeds the configured byte ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"message of {size} bytes exceeds limit of {limit} bytes")
        self.size = size
        self.limit = limit


class MalformedMediaTypeError(MailParseError):
    """Raised when a Content-Type or Content-Disposition value is unparsable."""


class UnsupportedEncodingError(MailParseError):
    """Raised for an unknown Content-Transfer-Encoding value."""

    def __init__(self, encoding: str) -> None:
        super().__init__(f"unknown encoding: {encoding}")
        self.encoding = encoding


class ContentDecodeError(MailParseError):
    """Raised when a payload does not conform to its transfer encoding."""


class NestingTooDeepError(MailParseError):
    """Raised when multipart/mixed containers nest beyond the ceiling."""

    def __init__(self, depth: int, limit: int) -> None:
        super().__init__(
            f"nested multipart/mixed at depth {depth} is above max depth {limit}"
        )
        self.depth = depth
        self.limit = limit


class UnrecognizedPartTypeError(MailParseError):
    """Raised when no classification rule matches a part's content-type."""

    def __init__(self, container: str, content_type: str) -> None:
        super().__init__(
            f"can't process multipart/{container} inner mime type: {content_type}"
        )
        self.container = container
        self.content_type = content_type


class HeaderParseError(MailParseError):
    """Raised for the first header field failing address or date grammar."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"invalid {field} header: {reason}")
        self.field = field
        self.reason = reason


__all__ = [
    "ContentDecodeError",
    "HeaderParseError",
    "MailParseError",
    "MalformedMediaTypeError",
    "MessageFormatError",
    "MessageTooLargeError",
    "MultipartFormatError",
    "NestingTooDeepError",
    "UnrecognizedPartTypeError",
    "UnsupportedEncodingError",
]
