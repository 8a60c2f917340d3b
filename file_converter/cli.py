from __future__ import annotations

import argparse
import asyncio
import base64
from pathlib import Path

from .config import settings
from .container import get_conversion_service
from .errors import ConversionError
from .logging_utils import get_logger
from .models import ConversionRequest, UploadedFile


logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="file-converter CLI")
    parser.add_argument("input", help="File to convert (jpg, jpeg, png, pdf, mp3, wav)")
    parser.add_argument(
        "--format",
        default=settings.default_output_format,
        help="Output format, e.g. png, webp, pdf, mp3",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Output path (defaults to the suggested name next to the input)",
    )

    args = parser.parse_args(argv)

    in_path = Path(args.input)
    upload = UploadedFile.from_upload(data=in_path.read_bytes(), file_name=in_path.name)
    req = ConversionRequest.new(file=upload, output_format=args.format)

    try:
        result = asyncio.run(get_conversion_service().convert(req))
    except ConversionError as exc:
        logger.error("File conversion failed: %s", exc.message)
        return 1

    out_path = Path(args.out) if args.out else in_path.with_name(result.suggested_file_name)
    data = base64.b64decode(result.encoded_bytes)
    out_path.write_bytes(data)
    logger.info("Wrote %s (%d bytes, %s)", out_path, len(data), result.mime_type)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
