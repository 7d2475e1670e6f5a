"""Probe the image stack once per process."""

import base64
import io
from dataclasses import dataclass
from functools import lru_cache

from PIL import Image, features

from richedit.image.models import ImageArtifact
from richedit.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class CapabilityFlags:
    """What the environment can do, decided once at startup.

    Attributes:
        has_raster_surface: Images can be created and resampled off-screen
        has_blob_constructor: Binary artifacts carrying a media type can be built
        has_array_buffer_view_support: Byte buffers can be exposed through views
        has_native_encode_to_blob: Surfaces encode straight into an in-memory blob
        has_any_blob_support: Some encode path exists (native, or data URI decoding)
        has_file_read_support: Uploaded bytes can be read for decoding
        has_object_url_support: Decoding can read the upload as a stream
    """

    has_raster_surface: bool = True
    has_blob_constructor: bool = True
    has_array_buffer_view_support: bool = True
    has_native_encode_to_blob: bool = True
    has_any_blob_support: bool = True
    has_file_read_support: bool = True
    has_object_url_support: bool = True

    @property
    def is_supported(self) -> bool:
        """True when the resize pipeline can run at all."""
        return self.has_raster_surface and self.has_any_blob_support and self.has_file_read_support


def _probe_raster_surface() -> bool:
    try:
        Image.new("RGBA", (2, 2)).resize((1, 1), Image.Resampling.LANCZOS)
    except (OSError, ValueError):
        return False
    return True


def _probe_blob_constructor() -> bool:
    try:
        return ImageArtifact(data=b"", mime_type="image/png").size == 0
    except TypeError:
        return False


def _probe_array_buffer_view() -> bool:
    try:
        return len(memoryview(bytearray(100)).tobytes()) == 100
    except (TypeError, ValueError):
        return False


def _probe_native_encoder() -> bytes | None:
    """Encode a 1x1 PNG in memory; returns the bytes or None."""
    if not features.check_codec("zlib"):
        return None
    output = io.BytesIO()
    try:
        Image.new("RGB", (1, 1)).save(output, format="PNG")
    except OSError:
        return None
    return output.getvalue()


def _probe_base64() -> bool:
    return base64.b64decode(base64.b64encode(b"\x00\xff")) == b"\x00\xff"


def _probe_stream_decode(sample: bytes | None) -> bool:
    if sample is None:
        return False
    try:
        with Image.open(io.BytesIO(sample)) as img:
            img.load()
    except OSError:
        return False
    return True


@lru_cache
def detect_capabilities() -> CapabilityFlags:
    """Probe the environment; cached for the lifetime of the process."""
    sample = _probe_native_encoder()
    has_view = _probe_array_buffer_view()
    has_base64 = _probe_base64()
    has_stream_decode = _probe_stream_decode(sample)

    flags = CapabilityFlags(
        has_raster_surface=_probe_raster_surface(),
        has_blob_constructor=_probe_blob_constructor(),
        has_array_buffer_view_support=has_view,
        has_native_encode_to_blob=sample is not None,
        has_any_blob_support=sample is not None or has_base64,
        has_file_read_support=has_stream_decode or has_base64,
        has_object_url_support=has_stream_decode,
    )
    log.debug("Image capabilities detected", **vars(flags))
    return flags
