from .chunk_buffer import BufferClosedError, OrderedChunkBuffer
from .conversion_service import ConversionService
from .image_service import ImageConversionService, normalize_image_format
from .pdf_service import PDFService
from .transcode_service import AudioTranscodeService, SupportedAudioFormat

__all__ = [
    "BufferClosedError",
    "OrderedChunkBuffer",
    "ConversionService",
    "ImageConversionService",
    "normalize_image_format",
    "PDFService",
    "AudioTranscodeService",
    "SupportedAudioFormat",
]
