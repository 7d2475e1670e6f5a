"""Pytest configuration and fixtures."""

import io
import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from richedit.dom import EditableDocument
from richedit.image import ImageFile


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_settings_cache():
    """Drop cached settings so environment changes in one test do not leak."""
    from richedit.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def encode_image(
    width: int, height: int, fmt: str = "PNG", mode: str = "RGB", color=(200, 30, 30)
) -> bytes:
    """Encode a solid-color image of the given size."""
    output = io.BytesIO()
    Image.new(mode, (width, height), color).save(output, format=fmt)
    return output.getvalue()


@pytest.fixture
def make_image() -> Callable[..., ImageFile]:
    """Factory for in-memory uploads.

    Usage: make_image(1200, 800, fmt="JPEG", mime_type="image/jpeg")
    """

    def _make(
        width: int,
        height: int,
        fmt: str = "PNG",
        mime_type: str = "image/png",
        name: str = "upload",
    ) -> ImageFile:
        mode = "P" if fmt == "GIF" else "RGB"
        color = 1 if fmt == "GIF" else (200, 30, 30)
        return ImageFile(
            data=encode_image(width, height, fmt, mode, color),
            mime_type=mime_type,
            name=name,
        )

    return _make


@pytest.fixture
def sample_png_file(temp_dir: Path) -> Path:
    """A 1200x800 PNG on disk."""
    file_path = temp_dir / "photo.png"
    file_path.write_bytes(encode_image(1200, 800))
    return file_path


@pytest.fixture
def sample_html() -> str:
    return (
        "<html><body>"
        '<div id="editor"><p>Hello <b>bold</b> world</p><p>Second <i>line</i></p></div>'
        '<div id="outside"><p>Elsewhere</p></div>'
        "</body></html>"
    )


@pytest.fixture
def document(sample_html: str) -> EditableDocument:
    return EditableDocument.from_html(sample_html)


@pytest.fixture
def sample_html_file(temp_dir: Path, sample_html: str) -> Path:
    file_path = temp_dir / "page.html"
    file_path.write_text(sample_html, encoding="utf-8")
    return file_path
