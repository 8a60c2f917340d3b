from __future__ import annotations

import os
from dataclasses import dataclass, field


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class AppConfig:
    """Application configuration loaded from environment.

    Codec knobs and runtime mode live here so they can be controlled via
    .env without touching the dispatcher.
    """

    # "development" enables diagnostic logging of request parameters and
    # stack traces. It never changes what the client sees.
    app_env: str = os.getenv("APP_ENV", "production").lower()

    image_quality: int = int(os.getenv("IMAGE_QUALITY", "80"))
    default_output_format: str = os.getenv("DEFAULT_OUTPUT_FORMAT", "png").lower()

    ffmpeg_binary: str = os.getenv("FFMPEG_BINARY", "ffmpeg")
    audio_read_chunk_size: int = int(os.getenv("AUDIO_READ_CHUNK_SIZE", "65536"))

    cors_allow_origins: list[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv(
                "CORS_ALLOW_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            )
        )
    )

    @property
    def debug(self) -> bool:
        return self.app_env == "development"


settings = AppConfig()
