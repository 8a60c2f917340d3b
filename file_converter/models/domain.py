from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .formats import DEFAULT_OUTPUT_FORMAT


DEFAULT_UPLOAD_NAME = "uploaded-file"


def infer_extension(file_name: str) -> str:
    """Lowercased text after the last dot, or '' when there is none."""
    _, dot, suffix = file_name.rpartition(".")
    return suffix.lower() if dot else ""


@dataclass(frozen=True)
class UploadedFile:
    """One uploaded file, alive for the duration of a single request."""

    raw_bytes: bytes
    original_name: str
    inferred_extension: str

    @classmethod
    def from_upload(cls, *, data: bytes, file_name: Optional[str]) -> "UploadedFile":
        name = file_name or DEFAULT_UPLOAD_NAME
        return cls(
            raw_bytes=data,
            original_name=name,
            inferred_extension=infer_extension(name),
        )

    @property
    def stem(self) -> str:
        # Everything before the first dot: "archive.tar.gz" -> "archive".
        return self.original_name.split(".")[0]


@dataclass(frozen=True)
class ConversionRequest:
    file: Optional[UploadedFile]
    requested_output_format: str = DEFAULT_OUTPUT_FORMAT

    @classmethod
    def new(
        cls,
        *,
        file: Optional[UploadedFile],
        output_format: Optional[str],
        default_format: str = DEFAULT_OUTPUT_FORMAT,
    ) -> "ConversionRequest":
        fmt = output_format if output_format is not None else default_format
        return cls(file=file, requested_output_format=fmt.lower())


@dataclass(frozen=True)
class ConversionResult:
    encoded_bytes: str
    mime_type: str
    suggested_file_name: str
