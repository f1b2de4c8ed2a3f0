"""Media-type and disposition header parsing."""

from __future__ import annotations

import logging
import re
from email import errors, policy

from ..core.errors import MalformedMediaTypeError

LOGGER = logging.getLogger(__name__)

_TOKEN = r"[^\x00-\x20\x7f()<>@,;:\\\"/\[\]?=]+"
_MEDIA_TYPE_RE = re.compile(rf"({_TOKEN})\s*/\s*({_TOKEN})")
_DISPOSITION_RE = re.compile(_TOKEN)


def _parse_params(header_name: str, value: str) -> dict[str, str]:
    header = policy.default.header_factory(header_name, value)
    params = getattr(header, "params", {})
    fatal = [
        defect
        for defect in header.defects
        if isinstance(defect, errors.HeaderMissingRequiredValue)
    ]
    if fatal:
        raise MalformedMediaTypeError(f"{header_name}: {fatal[0]}")
    if header.defects:
        LOGGER.debug("Tolerated %s defects: %s", header_name, header.defects)
    return dict(params)


def parse_media_type(value: str) -> tuple[str, dict[str, str]]:
    """Split ``type/subtype; k=v`` into a lowercased type and its parameters.

    Raises :class:`MalformedMediaTypeError` when the value is empty or the
    type/subtype pair is not made of two MIME tokens. Parameter keys are
    lowercased; RFC2231 continuations and charsets are resolved.
    """
    media_type = value.split(";", 1)[0].strip()
    match = _MEDIA_TYPE_RE.fullmatch(media_type)
    if match is None:
        raise MalformedMediaTypeError(f"invalid media type: {value!r}")
    content_type = f"{match.group(1)}/{match.group(2)}".lower()
    return content_type, _parse_params("content-type", value)


def parse_disposition(value: str) -> tuple[str, dict[str, str]]:
    """Split a Content-Disposition value into its lowercased type and parameters."""
    disposition = value.split(";", 1)[0].strip()
    if _DISPOSITION_RE.fullmatch(disposition) is None:
        raise MalformedMediaTypeError(f"invalid content disposition: {value!r}")
    return disposition.lower(), _parse_params("content-disposition", value)


__all__ = ["parse_disposition", "parse_media_type"]
