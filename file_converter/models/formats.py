from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class InputKind(str, Enum):
    IMAGE = "image"
    PDF = "pdf"
    AUDIO = "audio"


# Default output format when a client does not ask for one.
DEFAULT_OUTPUT_FORMAT = "png"

FALLBACK_MIME_TYPE = "application/octet-stream"

MIME_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "png": "image/png",
        "webp": "image/webp",
        "gif": "image/gif",
        "tiff": "image/tiff",
        "pdf": "application/pdf",
        "mp3": "audio/mpeg",
        "wav": "audio/wav",
    }
)


def mime_type_for(output_format: str) -> str:
    """Map an output extension to its MIME type."""
    return MIME_TYPES.get(output_format.lower(), FALLBACK_MIME_TYPE)


@dataclass(frozen=True)
class FormatCatalog:
    """Static table of permitted format transitions.

    ``input_formats`` maps every accepted input extension to the kind of
    codec that handles it; ``output_formats`` lists what each kind may be
    converted to. Both are read-only views and the instance is frozen.
    """

    input_formats: Mapping[str, InputKind]
    output_formats: Mapping[InputKind, frozenset[str]]
    _owner: Mapping[str, InputKind] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        owner: dict[str, InputKind] = {}
        for kind, formats in self.output_formats.items():
            for fmt in formats:
                if fmt in owner:
                    raise ValueError(
                        f"Output format '{fmt}' listed for both "
                        f"'{owner[fmt].value}' and '{kind.value}'"
                    )
                owner[fmt] = kind
        object.__setattr__(self, "input_formats", MappingProxyType(dict(self.input_formats)))
        object.__setattr__(
            self,
            "output_formats",
            MappingProxyType({k: frozenset(v) for k, v in self.output_formats.items()}),
        )
        object.__setattr__(self, "_owner", MappingProxyType(owner))

    @property
    def supported_inputs(self) -> tuple[str, ...]:
        return tuple(self.input_formats)

    def kind_for(self, extension: str) -> Optional[InputKind]:
        return self.input_formats.get(extension)

    def outputs_for(self, kind: InputKind) -> frozenset[str]:
        return self.output_formats.get(kind, frozenset())

    def category_of_output(self, output_format: str) -> Optional[InputKind]:
        return self._owner.get(output_format)

    def allows(self, extension: str, output_format: str) -> bool:
        kind = self.kind_for(extension)
        return kind is not None and output_format in self.outputs_for(kind)


# Ordered the way clients are told about them in error messages.
_IMAGE_OUTPUTS = ("jpg", "jpeg", "png", "webp", "gif", "tiff")

FORMAT_CATALOG = FormatCatalog(
    input_formats={
        "jpg": InputKind.IMAGE,
        "jpeg": InputKind.IMAGE,
        "png": InputKind.IMAGE,
        "pdf": InputKind.PDF,
        "mp3": InputKind.AUDIO,
        "wav": InputKind.AUDIO,
    },
    output_formats={
        InputKind.IMAGE: frozenset(_IMAGE_OUTPUTS),
        InputKind.PDF: frozenset({"pdf"}),
        InputKind.AUDIO: frozenset({"mp3", "wav"}),
    },
)


def ordered_outputs(kind: InputKind) -> list[str]:
    """Output formats of ``kind`` in a stable, human-friendly order."""
    formats = FORMAT_CATALOG.outputs_for(kind)
    if kind is InputKind.IMAGE:
        return [fmt for fmt in _IMAGE_OUTPUTS if fmt in formats]
    return sorted(formats)
