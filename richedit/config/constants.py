"""Constants for Richedit."""

from pathlib import Path

# Application constants
APP_NAME = "richedit"

# Default paths
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "richedit.yaml"

# Config file locations (in order of priority); the first resolves against the working directory
CONFIG_LOCATIONS = [
    Path(DEFAULT_CONFIG_FILE),
    Path.home() / ".config" / APP_NAME / "config.yaml",
]

# Image bounds applied when the caller gives none
DEFAULT_MAX_WIDTH = 640
DEFAULT_MAX_HEIGHT = 480

# Canvas encoders default to 0.92 for lossy formats
DEFAULT_JPEG_QUALITY = 92

# Blocks reachable through formatBlock instead of a direct command
BLOCK_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6", "p", "pre")

DEFAULT_PARAGRAPH_SEPARATOR = "p"

# Inline commands and the element each wraps the selection with
INLINE_COMMAND_TAGS = {
    "bold": "b",
    "italic": "i",
    "underline": "u",
    "strikeThrough": "strike",
    "subscript": "sub",
    "superscript": "sup",
}

# Encoders fall back to PNG for types they cannot write
FALLBACK_MIME_TYPE = "image/png"
