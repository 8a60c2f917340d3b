from __future__ import annotations

import base64

from file_converter import metrics as app_metrics
from file_converter.errors import ConversionError, ErrorKind
from file_converter.logging_utils import get_logger
from file_converter.models import (
    ConversionRequest,
    ConversionResult,
    FormatCatalog,
    InputKind,
    UploadedFile,
    mime_type_for,
    ordered_outputs,
)
from .image_service import ImageConversionService
from .pdf_service import PDFService
from .transcode_service import AudioTranscodeService


logger = get_logger(__name__)


class ConversionService:
    """Validates a conversion request and routes it to the matching codec."""

    def __init__(
        self,
        *,
        catalog: FormatCatalog,
        image_service: ImageConversionService,
        pdf_service: PDFService,
        transcode_service: AudioTranscodeService,
        debug: bool = False,
    ) -> None:
        self._catalog = catalog
        self._images = image_service
        self._pdfs = pdf_service
        self._audio = transcode_service
        self._debug = debug

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        """Convert the uploaded file into ``request.requested_output_format``.

        Raises :class:`ConversionError` for every rejected or failed
        conversion; other exceptions never escape.
        """
        output_format = request.requested_output_format
        kind_label = self._kind_label(request)
        format_label = (
            output_format
            if self._catalog.category_of_output(output_format) is not None
            else "other"
        )

        try:
            upload = self._require_file(request)
            if self._debug:
                logger.debug(
                    "Processing file: name=%s extension=%s output=%s size=%d",
                    upload.original_name,
                    upload.inferred_extension,
                    output_format,
                    len(upload.raw_bytes),
                )
            kind = self._validate(upload, output_format)

            app_metrics.increment_in_progress(kind_label)
            try:
                converted = await self._dispatch(kind, upload, output_format)
            finally:
                app_metrics.decrement_in_progress(kind_label)
        except ConversionError as exc:
            self._log_failure(request, exc)
            app_metrics.record_conversion_failed(kind_label, format_label, exc.kind.value)
            raise
        except Exception as exc:
            error = ConversionError(ErrorKind.CONVERSION_FAILED, str(exc) or type(exc).__name__)
            error.__cause__ = exc
            self._log_failure(request, error)
            app_metrics.record_conversion_failed(kind_label, format_label, error.kind.value)
            raise error from exc

        app_metrics.record_conversion_succeeded(kind_label, format_label, len(converted))
        return ConversionResult(
            encoded_bytes=base64.b64encode(converted).decode("ascii"),
            mime_type=mime_type_for(output_format),
            suggested_file_name=f"{upload.stem}.{output_format}",
        )

    def _kind_label(self, request: ConversionRequest) -> str:
        if request.file is None:
            return "unknown"
        kind = self._catalog.kind_for(request.file.inferred_extension)
        return kind.value if kind is not None else "unknown"

    @staticmethod
    def _require_file(request: ConversionRequest) -> UploadedFile:
        if request.file is None or not request.file.raw_bytes:
            raise ConversionError(ErrorKind.MISSING_FILE, "No file uploaded")
        return request.file

    def _validate(self, upload: UploadedFile, output_format: str) -> InputKind:
        extension = upload.inferred_extension
        kind = self._catalog.kind_for(extension)
        if kind is None:
            supported = ", ".join(self._catalog.supported_inputs)
            raise ConversionError(
                ErrorKind.UNSUPPORTED_INPUT,
                f"Unsupported input file format: {extension}. "
                f"Supported formats: {supported}",
            )

        if output_format not in self._catalog.outputs_for(kind):
            allowed = ", ".join(ordered_outputs(kind))
            raise ConversionError(
                ErrorKind.UNSUPPORTED_OUTPUT,
                f"Unsupported output format: {output_format} for input {extension}. "
                f"Supported formats: {allowed}",
            )
        return kind

    async def _dispatch(self, kind: InputKind, upload: UploadedFile, output_format: str) -> bytes:
        extension = upload.inferred_extension

        if kind is InputKind.IMAGE:
            try:
                return await self._images.convert(upload.raw_bytes, target_format=output_format)
            except Exception as exc:
                raise ConversionError(
                    ErrorKind.IMAGE_CONVERSION_FAILED,
                    f"Image conversion failed: {exc}",
                ) from exc

        if kind is InputKind.PDF:
            # Parse failures fall through to the generic CONVERSION_FAILED kind.
            return await self._pdfs.round_trip(upload.raw_bytes)

        if kind is InputKind.AUDIO:
            try:
                return await self._audio.transcode(
                    upload.raw_bytes,
                    input_format=extension,
                    target_format=output_format,
                )
            except ValueError as exc:
                raise ConversionError(
                    ErrorKind.AUDIO_CONVERSION_FAILED,
                    f"Audio conversion failed: {exc}",
                ) from exc

        raise ConversionError(
            ErrorKind.UNSUPPORTED_COMBINATION,
            f"Unsupported format combination: {extension} to {output_format}",
        )

    def _log_failure(self, request: ConversionRequest, error: ConversionError) -> None:
        logger.warning("Conversion rejected (%s): %s", error.kind.value, error.message)
        if self._debug:
            upload = request.file
            logger.debug(
                "Conversion error: kind=%s name=%s extension=%s output=%s",
                error.kind.value,
                upload.original_name if upload else None,
                upload.inferred_extension if upload else None,
                request.requested_output_format,
                exc_info=error.__cause__ or error,
            )
