"""Data URI encoding and decoding."""

import base64
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

from richedit.exceptions import ImageProcessingError


@dataclass
class DataURI:
    """A decoded data URI."""

    mime_type: str
    data: bytes
    is_base64: bool


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode ``data`` as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_uri(uri: str) -> DataURI:
    """Split a data URI into media type and payload.

    The payload is base64-decoded when the header carries the ``base64``
    marker and percent-decoded otherwise.

    Raises:
        ImageProcessingError: If ``uri`` is not a data URI
    """
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:"):
        raise ImageProcessingError(f"Not a data URI: {uri[:40]!r}")

    is_base64 = "base64" in header
    if is_base64:
        data = base64.b64decode(payload)
    else:
        data = unquote_to_bytes(payload)

    mime_type = header.split(":", 1)[1].split(";")[0]
    return DataURI(mime_type=mime_type, data=data, is_base64=is_base64)
