from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from starlette.datastructures import UploadFile
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from file_converter import container
from file_converter.config import settings
from file_converter.errors import ConversionError
from file_converter.logging_utils import get_logger
from file_converter.models import (
    FORMAT_CATALOG,
    ConversionRequest,
    ConvertResponse,
    FormatsResponse,
    HealthResponse,
    InputKind,
    UploadedFile,
    ordered_outputs,
)


logger = get_logger(__name__)
router = APIRouter()

ERROR_PREFIX = "File conversion failed"


@router.get("/", response_class=PlainTextResponse)
async def root() -> PlainTextResponse:
    """Simple root endpoint for quick sanity checks."""
    return PlainTextResponse("file-converter is running", media_type="text/plain")


@router.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get("/metrics")
async def metrics() -> PlainTextResponse:
    payload = generate_latest()
    return PlainTextResponse(payload, media_type=CONTENT_TYPE_LATEST)


@router.get("/api/formats", response_model=FormatsResponse)
async def list_formats() -> FormatsResponse:
    """Advertise which conversions the server accepts."""
    return FormatsResponse(
        input_formats=list(FORMAT_CATALOG.supported_inputs),
        output_formats={kind.value: ordered_outputs(kind) for kind in InputKind},
    )


@router.post("/api/convert", response_model=ConvertResponse)
async def convert_file(
    request: Request,
    format: Optional[str] = Query(None),
) -> ConvertResponse:
    """Convert the uploaded ``file`` part into ``format``.

    Every failure is reported as HTTP 500 with a
    ``"File conversion failed: <cause>"`` detail.

    The form is read here rather than declared as a parameter so that a
    malformed body or a plain-text ``file`` field is reported the same way.
    """
    try:
        form = await request.form()
    except Exception as exc:
        logger.error("Unreadable multipart body", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"{ERROR_PREFIX}: Form data is unreadable",
        ) from exc

    parts = form.getlist("file")
    upload = await _read_upload(parts[0] if parts else None)

    req = ConversionRequest.new(
        file=upload,
        output_format=format,
        default_format=settings.default_output_format,
    )

    try:
        result = await container.get_conversion_service().convert(req)
    except ConversionError as exc:
        raise HTTPException(
            status_code=500,
            detail=f"{ERROR_PREFIX}: {exc.message}",
        ) from exc
    except Exception as exc:
        logger.error("Unexpected conversion failure", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_PREFIX) from exc

    return ConvertResponse(
        file=result.encoded_bytes,
        type=result.mime_type,
        name=result.suggested_file_name,
    )


async def _read_upload(part: Union[UploadFile, str, None]) -> Optional[UploadedFile]:
    """Turn the ``file`` form part into an :class:`UploadedFile`.

    A part sent without a filename arrives as text and is treated as an
    unnamed upload.
    """
    if part is None:
        return None
    if isinstance(part, UploadFile):
        data = await part.read()
        return UploadedFile.from_upload(data=data, file_name=part.filename)
    return UploadedFile.from_upload(data=part.encode("utf-8"), file_name=None)
