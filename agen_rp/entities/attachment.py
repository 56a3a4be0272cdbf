from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from agen_rp.entities.errors import EncodingError


@dataclass(frozen=True)
class InlineAttachment:
    """Decoded binary payload with its media type."""

    mime_type: str
    data: bytes

    def to_data_uri(self) -> str:
        return encode_data_uri(self.mime_type, self.data)


def encode_data_uri(mime_type: str, data: bytes) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def decode_data_uri(data_uri: str) -> InlineAttachment:
    """
    Decode ``data:<mime>;base64,<payload>`` into an InlineAttachment.

    Raises:
        EncodingError: If the separator, scheme or media type is missing, or
            the payload is not valid base64.
    """
    header, separator, payload = data_uri.partition(",")
    if not separator:
        raise EncodingError("Data URI is missing the ',' separator")

    if not header.startswith("data:"):
        raise EncodingError("Data URI is missing the 'data:' scheme")

    mime_type = header[len("data:") :].split(";", 1)[0].strip()
    if not mime_type:
        raise EncodingError("Data URI is missing its media type")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Data URI payload is not valid base64: {e}") from e

    return InlineAttachment(mime_type=mime_type, data=data)


def strip_data_uri_prefix(content: str) -> str:
    """Return the base64 payload of ``content`` whether or not it is a data URI."""
    if content.startswith("data:"):
        _, separator, payload = content.partition(",")
        if not separator:
            raise EncodingError("Data URI is missing the ',' separator")
        return payload
    return content


def decode_base64_payload(content: str) -> bytes:
    """
    Decode base64 ``content``, with or without a data URI prefix.

    Raises:
        EncodingError: If the payload is not valid base64.
    """
    payload = strip_data_uri_prefix(content)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Payload is not valid base64: {e}") from e
