from .api import ConvertResponse, FormatsResponse, HealthResponse
from .domain import ConversionRequest, ConversionResult, UploadedFile
from .formats import (
    DEFAULT_OUTPUT_FORMAT,
    FORMAT_CATALOG,
    FormatCatalog,
    InputKind,
    mime_type_for,
    ordered_outputs,
)

__all__ = [
    "ConvertResponse",
    "FormatsResponse",
    "HealthResponse",
    "ConversionRequest",
    "ConversionResult",
    "UploadedFile",
    "DEFAULT_OUTPUT_FORMAT",
    "FORMAT_CATALOG",
    "FormatCatalog",
    "InputKind",
    "mime_type_for",
    "ordered_outputs",
]
