from __future__ import annotations

import asyncio
from io import BytesIO

from pypdf import PdfReader, PdfWriter

from file_converter.logging_utils import get_logger


logger = get_logger(__name__)


class PDFService:
    """PDF handling backed by pypdf.

    Only a structural round trip is offered: the document is parsed and
    written back out unchanged. Nothing is rasterized or re-paginated.
    """

    async def round_trip(self, data: bytes) -> bytes:
        out = await asyncio.to_thread(self._rewrite, data)
        logger.info("[DONE] pdf round trip %d -> %d bytes", len(data), len(out))
        return out

    @staticmethod
    def _rewrite(data: bytes) -> bytes:
        reader = PdfReader(BytesIO(data))
        writer = PdfWriter(clone_from=reader)
        output = BytesIO()
        writer.write(output)
        return output.getvalue()
