from __future__ import annotations

from functools import lru_cache

from file_converter.config import settings
from file_converter.models import FORMAT_CATALOG
from file_converter.services import (
    AudioTranscodeService,
    ConversionService,
    ImageConversionService,
    PDFService,
)


@lru_cache(maxsize=1)
def get_image_service() -> ImageConversionService:
    return ImageConversionService(quality=settings.image_quality)


@lru_cache(maxsize=1)
def get_pdf_service() -> PDFService:
    return PDFService()


@lru_cache(maxsize=1)
def get_transcode_service() -> AudioTranscodeService:
    return AudioTranscodeService(
        ffmpeg_binary=settings.ffmpeg_binary,
        read_chunk_size=settings.audio_read_chunk_size,
    )


@lru_cache(maxsize=1)
def get_conversion_service() -> ConversionService:
    return ConversionService(
        catalog=FORMAT_CATALOG,
        image_service=get_image_service(),
        pdf_service=get_pdf_service(),
        transcode_service=get_transcode_service(),
        debug=settings.debug,
    )
