from __future__ import annotations

import asyncio
from io import BytesIO

from PIL import Image

from file_converter.logging_utils import get_logger


logger = get_logger(__name__)


# Pillow plugin names for the output extensions we accept.
_PIL_FORMATS = {
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
    "tiff": "TIFF",
}

# Modes each encoder can store directly. Anything else is converted to RGB,
# or RGBA when the source carries alpha and the encoder keeps it.
_WRITABLE_MODES = {
    "JPEG": {"L", "RGB", "CMYK"},
    "PNG": {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"},
    "WEBP": {"RGB", "RGBA"},
    "GIF": {"1", "L", "P", "RGB", "RGBA"},
    "TIFF": {"1", "L", "LA", "I", "I;16", "F", "P", "RGB", "RGBA", "CMYK"},
}

# Encoders that take a quality setting.
_LOSSY_FORMATS = {"JPEG", "WEBP"}


def _has_alpha(img: Image.Image) -> bool:
    return "A" in img.getbands() or (img.mode == "P" and "transparency" in img.info)


def normalize_image_format(fmt: str) -> str:
    """Return the canonical codec identifier for an image extension."""
    fmt = fmt.lower()
    return "jpeg" if fmt == "jpg" else fmt


class ImageConversionService:
    """Re-encode raster images with Pillow."""

    def __init__(self, *, quality: int = 80) -> None:
        self._quality = quality

    async def convert(self, data: bytes, *, target_format: str) -> bytes:
        codec = normalize_image_format(target_format)
        logger.info(
            "[START] image convert -> %s (quality=%d, len=%d)",
            codec,
            self._quality,
            len(data),
        )
        out = await asyncio.to_thread(self._encode, data, codec)
        logger.info("[DONE] image convert produced %d bytes", len(out))
        return out

    def _encode(self, data: bytes, codec: str) -> bytes:
        pil_format = _PIL_FORMATS.get(codec)
        if pil_format is None:
            raise ValueError(f"Unsupported image output format '{codec}'")

        with Image.open(BytesIO(data)) as img:
            img.load()
            writable = _WRITABLE_MODES[pil_format]
            if img.mode not in writable:
                target_mode = "RGBA" if _has_alpha(img) and "RGBA" in writable else "RGB"
                img = img.convert(target_mode)
            save_kwargs: dict[str, object] = {}
            if pil_format in _LOSSY_FORMATS:
                save_kwargs["quality"] = self._quality
            output = BytesIO()
            img.save(output, format=pil_format, **save_kwargs)
        return output.getvalue()
