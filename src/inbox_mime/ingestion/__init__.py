"""Message parsing pipeline components."""

from .decoder import decode_content
from .headers import HeaderResolver, decode_mime_sentence
from .multipart import MultipartReader, Part
from .parser import EmailParser, parse
from .resolver import ContainerKind, MultipartResolver, Resolution

__all__ = [
    "ContainerKind",
    "EmailParser",
    "HeaderResolver",
    "MultipartReader",
    "MultipartResolver",
    "Part",
    "Resolution",
    "decode_content",
    "decode_mime_sentence",
    "parse",
]
