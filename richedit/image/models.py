"""Data types flowing through the image pipeline."""

import mimetypes
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from richedit.config.constants import DEFAULT_MAX_HEIGHT, DEFAULT_MAX_WIDTH
from richedit.exceptions import ConfigurationError


@dataclass(frozen=True)
class Dimensions:
    """A width/height pair in pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(
                f"Dimensions must be positive, got {self.width}x{self.height}"
            )

    @classmethod
    def coerce(cls, value: Any) -> "Dimensions":
        """Build bounds from None, a Dimensions, a (width, height) pair or a mapping."""
        if value is None:
            return DEFAULT_MAX_DIMENSIONS
        if isinstance(value, Dimensions):
            return value
        if isinstance(value, dict):
            return cls(int(value["width"]), int(value["height"]))
        width, height = value
        return cls(int(width), int(height))

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


DEFAULT_MAX_DIMENSIONS = Dimensions(DEFAULT_MAX_WIDTH, DEFAULT_MAX_HEIGHT)


@dataclass
class ImageFile:
    """An uploaded file with its declared media type."""

    data: bytes
    mime_type: str
    name: str = ""
    last_modified: datetime = field(default_factory=datetime.now)

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Path, mime_type: str | None = None) -> "ImageFile":
        """Read a file from disk, guessing its media type from the extension."""
        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(data=path.read_bytes(), mime_type=mime_type, name=path.name)


@dataclass
class ImageArtifact:
    """A re-encoded image produced by the resizer."""

    data: bytes
    mime_type: str = ""
    width: int = 0
    height: int = 0

    @property
    def size(self) -> int:
        return len(self.data)

    def to_file(self, name: str) -> ImageFile:
        """Name the artifact so it can be uploaded like the original file."""
        return ImageFile(data=self.data, mime_type=self.mime_type, name=name)


@dataclass
class ResizeResult:
    """Outcome of one resize call."""

    artifact: ImageFile | ImageArtifact
    resized: bool

    @property
    def data(self) -> bytes:
        return self.artifact.data

    @property
    def mime_type(self) -> str:
        return self.artifact.mime_type
