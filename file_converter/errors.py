from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    MISSING_FILE = "missing_file"
    UNSUPPORTED_INPUT = "unsupported_input"
    UNSUPPORTED_OUTPUT = "unsupported_output"
    UNSUPPORTED_COMBINATION = "unsupported_combination"
    IMAGE_CONVERSION_FAILED = "image_conversion_failed"
    AUDIO_CONVERSION_FAILED = "audio_conversion_failed"
    CONVERSION_FAILED = "conversion_failed"


class ConversionError(ValueError):
    """Raised by the dispatcher for any rejected or failed conversion."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"ConversionError(kind={self.kind.value!r}, message={self.message!r})"
