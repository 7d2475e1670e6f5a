"""Scale uploaded images down to bounding dimensions before they are inserted.

Everything the pipeline cannot or should not handle is passed through: the
callback receives the original file with ``resized=False``. Callers must treat
that flag as authoritative.
"""

from __future__ import annotations

import asyncio
import io
import re
from collections.abc import Callable
from typing import Any

import anyio
from PIL import Image

from richedit.config.constants import DEFAULT_JPEG_QUALITY, FALLBACK_MIME_TYPE
from richedit.image.capabilities import CapabilityFlags, detect_capabilities
from richedit.image.datauri import parse_data_uri, to_data_uri
from richedit.image.models import Dimensions, ImageArtifact, ImageFile, ResizeResult
from richedit.utils.logging import get_logger

log = get_logger(__name__)

ResizeCallback = Callable[[ImageFile | ImageArtifact, bool], None]

_IMAGE_TYPE = re.compile(r"image.*")
_GIF_TYPE = re.compile(r"image/gif")

# Errors Pillow raises for unreadable or hostile input
_DECODE_ERRORS = (OSError, ValueError, SyntaxError, Image.DecompressionBombError)

# Writers reject modes they cannot store with either of these
_ENCODE_ERRORS = (OSError, ValueError)


def is_too_large(width: int, height: int, bounds: Dimensions) -> bool:
    """Landscape and square images are bound by width, anything else by height."""
    if width >= height and width > bounds.width:
        return True
    return height > bounds.height


def scaled_dimensions(width: int, height: int, bounds: Dimensions) -> Dimensions:
    """Scale both sides by ``bounds.width / width``.

    The ratio comes from the width bound even when the height bound triggered
    the resize, so tall narrow images come out wider than ``bounds.width``.
    """
    ratio = bounds.width / width
    return Dimensions(max(1, round(width * ratio)), max(1, round(height * ratio)))


def _pil_format_for(mime_type: str) -> str | None:
    """Pillow format that can write ``mime_type``, if any."""
    Image.init()
    for fmt, mime in Image.MIME.items():
        if mime == mime_type and fmt in Image.SAVE:
            return fmt
    return None


class ImageResizer:
    """Decode, measure, scale and re-encode uploaded images."""

    def __init__(
        self,
        capabilities: CapabilityFlags | None = None,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ) -> None:
        """Initialize the resizer.

        Args:
            capabilities: Environment flags; probed once per process if omitted
            jpeg_quality: Quality used for lossy re-encoding
        """
        self.capabilities = capabilities or detect_capabilities()
        self.jpeg_quality = jpeg_quality
        self._tasks: set[asyncio.Task[None]] = set()

    def is_supported(self) -> bool:
        return self.capabilities.is_supported

    def resize(
        self,
        file: ImageFile,
        max_dimensions: Any = None,
        callback: ResizeCallback | None = None,
    ) -> bool:
        """Start normalizing ``file``.

        ``max_dimensions`` may be omitted (640x480) or replaced by the callback
        itself. The callback fires exactly once with ``(artifact, resized)``.

        Returns:
            True if decoding was started, False if the file was passed through
        """
        if callback is None and callable(max_dimensions):
            callback, max_dimensions = max_dimensions, None
        if callback is None:
            raise TypeError("resize() requires a callback")

        started, _task = self._start(file, Dimensions.coerce(max_dimensions), callback)
        return started

    async def resize_async(self, file: ImageFile, max_dimensions: Any = None) -> ResizeResult:
        """Awaitable form of ``resize``; resolves once with the outcome."""
        future: asyncio.Future[ResizeResult] = asyncio.get_running_loop().create_future()

        def _resolve(artifact: ImageFile | ImageArtifact, resized: bool) -> None:
            if not future.done():
                future.set_result(ResizeResult(artifact=artifact, resized=resized))

        _started, task = self._start(file, Dimensions.coerce(max_dimensions), _resolve)
        if task is not None:
            await task
        return await future

    def _start(
        self, file: ImageFile, bounds: Dimensions, callback: ResizeCallback
    ) -> tuple[bool, asyncio.Task[None] | None]:
        mime_type = file.mime_type or ""

        if not self.is_supported() or not _IMAGE_TYPE.search(mime_type):
            log.debug("Passing file through unresized", name=file.name, mime_type=mime_type)
            callback(file, False)
            return False, None

        if _GIF_TYPE.search(mime_type):
            # Re-rendering would keep only the first frame of an animation
            log.debug("Skipping GIF", name=file.name)
            callback(file, False)
            return False, None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            anyio.run(self._process, file, bounds, callback)
            return True, None

        task = loop.create_task(self._process(file, bounds, callback))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True, task

    async def _process(self, file: ImageFile, bounds: Dimensions, callback: ResizeCallback) -> None:
        """Run the pipeline; whatever happens, ``callback`` fires exactly once."""
        fired = False

        def _once(artifact: ImageFile | ImageArtifact, resized: bool) -> None:
            nonlocal fired
            if not fired:
                fired = True
                callback(artifact, resized)

        try:
            await self._normalize(file, bounds, _once)
        except Exception:
            log.exception(
                "Unexpected error resizing image, passing original through", name=file.name
            )
            _once(file, False)

    async def _normalize(
        self, file: ImageFile, bounds: Dimensions, callback: ResizeCallback
    ) -> None:
        try:
            image = await anyio.to_thread.run_sync(self._decode, file)
        except _DECODE_ERRORS as e:
            log.warning(
                "Could not decode image, passing original through", name=file.name, error=str(e)
            )
            callback(file, False)
            return

        try:
            width, height = image.size
            if not is_too_large(width, height, bounds):
                callback(file, False)
                return

            target = scaled_dimensions(width, height, bounds)
            surface = await anyio.to_thread.run_sync(self._render, image, target)
        finally:
            image.close()

        try:
            if self.capabilities.has_native_encode_to_blob:
                artifact = await anyio.to_thread.run_sync(
                    self._encode_native, surface, file.mime_type
                )
            else:
                artifact = self._to_blob(surface, file.mime_type)
        except _ENCODE_ERRORS as e:
            log.warning(
                "Could not encode image, passing original through", name=file.name, error=str(e)
            )
            callback(file, False)
            return

        log.debug(
            "Image resized",
            name=file.name,
            original=f"{width}x{height}",
            new=str(target),
            size=artifact.size,
        )
        callback(artifact, True)

    def _decode(self, file: ImageFile) -> Image.Image:
        """Load pixel data, from the raw stream or through a data URI."""
        if self.capabilities.has_object_url_support:
            source = io.BytesIO(file.data)
        else:
            source = io.BytesIO(parse_data_uri(to_data_uri(file.data, file.mime_type)).data)
        image = Image.open(source)
        image.load()
        return image

    def _render(self, image: Image.Image, target: Dimensions) -> Image.Image:
        """Draw ``image`` onto an RGBA surface of the target size."""
        surface = image.convert("RGBA") if image.mode != "RGBA" else image
        return surface.resize((target.width, target.height), Image.Resampling.LANCZOS)

    def _encode(self, surface: Image.Image, mime_type: str) -> tuple[bytes, str]:
        """Encode at ``mime_type``, falling back to PNG when Pillow cannot write it."""
        fmt = _pil_format_for(mime_type)
        if fmt is None:
            fmt, mime_type = "PNG", FALLBACK_MIME_TYPE

        output = io.BytesIO()
        if fmt == "JPEG":
            surface.convert("RGB").save(output, format=fmt, quality=self.jpeg_quality)
        else:
            try:
                surface.save(output, format=fmt)
            except _ENCODE_ERRORS:
                # Format has no alpha channel
                output = io.BytesIO()
                try:
                    surface.convert("RGB").save(output, format=fmt)
                except _ENCODE_ERRORS as e:
                    log.debug("Encoder rejected surface, using PNG", format=fmt, error=str(e))
                    output = io.BytesIO()
                    surface.save(output, format="PNG")
                    mime_type = FALLBACK_MIME_TYPE
        return output.getvalue(), mime_type

    def _encode_native(self, surface: Image.Image, mime_type: str) -> ImageArtifact:
        data, encoded_type = self._encode(surface, mime_type)
        return ImageArtifact(
            data=data, mime_type=encoded_type, width=surface.width, height=surface.height
        )

    def _to_blob(self, surface: Image.Image, mime_type: str) -> ImageArtifact:
        """Encode through a data URI and copy the decoded bytes into a buffer."""
        data, encoded_type = self._encode(surface, mime_type)
        decoded = parse_data_uri(to_data_uri(data, encoded_type))

        buffer = bytearray(len(decoded.data))
        if self.capabilities.has_array_buffer_view_support:
            view = memoryview(buffer)
            view[:] = decoded.data
            payload = view.tobytes()
        else:
            buffer[:] = decoded.data
            payload = bytes(buffer)

        mime = decoded.mime_type if self.capabilities.has_blob_constructor else ""
        return ImageArtifact(
            data=payload, mime_type=mime, width=surface.width, height=surface.height
        )
