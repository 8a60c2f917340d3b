from __future__ import annotations

import asyncio
from enum import Enum

from file_converter.logging_utils import get_logger
from .chunk_buffer import OrderedChunkBuffer


logger = get_logger(__name__)


class SupportedAudioFormat(str, Enum):
    MP3 = "mp3"
    WAV = "wav"


class AudioTranscodeService:
    """Audio transcoder built on the ffmpeg CLI.

    Input bytes are streamed to ffmpeg on stdin and the encoded output is
    read back from stdout chunk by chunk. Chunks land in an
    :class:`OrderedChunkBuffer` in the order ffmpeg emitted them; the
    caller gets the joined bytes once ffmpeg exits cleanly.

    ffmpeg writes to ``pipe:1`` so no output file is ever created.
    There is no timeout: a hung ffmpeg hangs the caller until it is
    cancelled, at which point the process is killed.
    """

    def __init__(self, *, ffmpeg_binary: str = "ffmpeg", read_chunk_size: int = 65536) -> None:
        self._ffmpeg_binary = ffmpeg_binary
        self._read_chunk_size = max(1, read_chunk_size)

    async def transcode(
        self,
        data: bytes,
        *,
        input_format: str,
        target_format: str,
    ) -> bytes:
        logger.info(
            "[START] transcode in=%s -> out=%s (len=%d)",
            input_format,
            target_format,
            len(data),
        )
        cmd = self._build_command(input_format=input_format, target_format=target_format)
        logger.info("[FFMPEG] cmd=%s (input_len=%d)", " ".join(cmd), len(data))

        buffer = OrderedChunkBuffer()
        pump = asyncio.create_task(self._pump(cmd, data, buffer))

        def _on_pump_done(task: asyncio.Task[None]) -> None:
            if buffer.done:
                return
            exc = None if task.cancelled() else task.exception()
            buffer.fail(exc or RuntimeError("ffmpeg pump exited without a result"))

        pump.add_done_callback(_on_pump_done)
        try:
            out = await buffer.result()
        finally:
            if not pump.done():
                pump.cancel()
                try:
                    await pump
                except asyncio.CancelledError:
                    pass

        logger.info(
            "[FFMPEG] produced %d bytes of audio data in %d chunks",
            len(out),
            buffer.chunk_count,
        )
        return out

    def _build_command(self, *, input_format: str, target_format: str) -> list[str]:
        def input_args(fmt: str) -> list[str]:
            try:
                fmt_enum = SupportedAudioFormat(fmt)
            except ValueError as exc:
                raise ValueError(f"Unsupported input format '{fmt}'") from exc
            return ["-f", fmt_enum.value]

        def output_args(fmt: str) -> list[str]:
            try:
                fmt_enum = SupportedAudioFormat(fmt)
            except ValueError as exc:
                raise ValueError(f"Unsupported output format '{fmt}'") from exc

            if fmt_enum is SupportedAudioFormat.MP3:
                return ["-f", "mp3", "-b:a", "128k"]
            return ["-f", "wav"]

        return [
            self._ffmpeg_binary,
            "-hide_banner",
            "-loglevel",
            "error",
            *input_args(input_format),
            "-i",
            "pipe:0",
            *output_args(target_format),
            "pipe:1",
        ]

    async def _pump(self, cmd: list[str], data: bytes, buffer: OrderedChunkBuffer) -> None:
        """Run ``cmd`` and be the single producer for ``buffer``."""
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("ffmpeg execution failed: %s", exc, exc_info=True)
            buffer.fail(ValueError(f"ffmpeg execution failed: {exc}"))
            return

        try:
            _, stderr, _ = await asyncio.gather(
                self._feed(proc, data),
                proc.stderr.read(),
                self._collect(proc, buffer),
            )
            returncode = await proc.wait()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise
        except Exception as exc:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            buffer.fail(exc)
            return

        if returncode != 0:
            message = stderr.decode("utf-8", errors="ignore").strip() or str(returncode)
            logger.error("ffmpeg transcoding failed: %s", message)
            buffer.fail(ValueError(f"ffmpeg transcoding failed: {message}"))
            return

        if buffer.size == 0:
            logger.error("ffmpeg produced no output data")
            buffer.fail(ValueError("ffmpeg produced no output data"))
            return

        buffer.close()

    @staticmethod
    async def _feed(proc: asyncio.subprocess.Process, data: bytes) -> None:
        assert proc.stdin is not None
        try:
            proc.stdin.write(data)
            await proc.stdin.drain()
        except (BrokenPipeError, ConnectionResetError):
            # ffmpeg stopped reading early; its exit status tells us why.
            logger.warning("ffmpeg closed stdin before all input was written")
        finally:
            proc.stdin.close()

    async def _collect(self, proc: asyncio.subprocess.Process, buffer: OrderedChunkBuffer) -> None:
        assert proc.stdout is not None
        while True:
            chunk = await proc.stdout.read(self._read_chunk_size)
            if not chunk:
                return
            buffer.append(chunk)
