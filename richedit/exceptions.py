"""Custom exceptions for Richedit."""


class RicheditError(Exception):
    """Base exception class for Richedit."""

    pass


class EditorOperationError(RicheditError):
    """An editing command reported failure on both attempts."""

    def __init__(self, command: str, message: str = "Unable to perform the operation") -> None:
        self.command = command
        super().__init__(f"{message}: {command}")


class NoSelectionError(RicheditError):
    """An operation needed selected text but the stored selection is empty."""

    def __init__(self, message: str = "No Selection Made") -> None:
        super().__init__(message)


class ImageProcessingError(RicheditError):
    """Error during image processing."""

    pass


class ConfigurationError(RicheditError):
    """Configuration error."""

    pass
