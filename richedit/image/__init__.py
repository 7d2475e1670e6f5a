"""Image normalization for uploads."""

from richedit.image.capabilities import CapabilityFlags, detect_capabilities
from richedit.image.models import (
    DEFAULT_MAX_DIMENSIONS,
    Dimensions,
    ImageArtifact,
    ImageFile,
    ResizeResult,
)
from richedit.image.resizer import ImageResizer, is_too_large, scaled_dimensions

__all__ = [
    "CapabilityFlags",
    "DEFAULT_MAX_DIMENSIONS",
    "Dimensions",
    "ImageArtifact",
    "ImageFile",
    "ImageResizer",
    "ResizeResult",
    "detect_capabilities",
    "is_too_large",
    "scaled_dimensions",
]
