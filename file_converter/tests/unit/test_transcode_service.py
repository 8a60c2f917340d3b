from __future__ import annotations

import asyncio
import io
import os
import shutil
import sys
import wave

import pytest

from file_converter.services import AudioTranscodeService


requires_ffmpeg = pytest.mark.skipif(
    shutil.which("ffmpeg") is None, reason="ffmpeg binary not available"
)


def _python_command(script: str) -> list[str]:
    return [sys.executable, "-c", script]


def _use_command(monkeypatch: pytest.MonkeyPatch, script: str) -> None:
    def fake_build_command(self, **kwargs) -> list[str]:  # type: ignore[no-untyped-def]
        return _python_command(script)

    monkeypatch.setattr(
        AudioTranscodeService,
        "_build_command",
        fake_build_command,
        raising=True,
    )


def test_build_command_for_wav_to_mp3() -> None:
    service = AudioTranscodeService(ffmpeg_binary="/opt/ffmpeg")

    cmd = service._build_command(input_format="wav", target_format="mp3")

    assert cmd[0] == "/opt/ffmpeg"
    assert cmd[cmd.index("-i") - 2 : cmd.index("-i")] == ["-f", "wav"]
    assert cmd[cmd.index("-i") + 1] == "pipe:0"
    assert ["-f", "mp3", "-b:a", "128k"] == cmd[cmd.index("pipe:0") + 1 : -1]
    assert cmd[-1] == "pipe:1"


def test_build_command_rejects_unsupported_formats() -> None:
    service = AudioTranscodeService()

    with pytest.raises(ValueError) as exc_info:
        service._build_command(input_format="ogg", target_format="mp3")
    assert "Unsupported input format" in str(exc_info.value)

    with pytest.raises(ValueError) as exc_info:
        service._build_command(input_format="wav", target_format="flac")
    assert "Unsupported output format" in str(exc_info.value)


@pytest.mark.asyncio
async def test_chunks_are_concatenated_in_emission_order(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    script = (
        "import sys, time\n"
        "sys.stdin.buffer.read()\n"
        "for i, delay in enumerate([0.05, 0.0, 0.03, 0.01]):\n"
        "    time.sleep(delay)\n"
        "    sys.stdout.buffer.write(bytes([65 + i]) * 700)\n"
        "    sys.stdout.buffer.flush()\n"
    )
    _use_command(monkeypatch, script)
    service = AudioTranscodeService(read_chunk_size=256)

    out = await service.transcode(b"input", input_format="wav", target_format="mp3")

    assert out == b"A" * 700 + b"B" * 700 + b"C" * 700 + b"D" * 700


@pytest.mark.asyncio
async def test_large_input_is_streamed_without_deadlock(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    script = (
        "import sys\n"
        "while True:\n"
        "    block = sys.stdin.buffer.read1(4096)\n"
        "    if not block:\n"
        "        break\n"
        "    sys.stdout.buffer.write(block)\n"
        "    sys.stdout.buffer.flush()\n"
    )
    _use_command(monkeypatch, script)
    service = AudioTranscodeService(read_chunk_size=1024)
    data = bytes(range(256)) * 4096  # 1 MiB, larger than any pipe buffer

    out = await service.transcode(data, input_format="mp3", target_format="wav")

    assert out == data


@pytest.mark.asyncio
async def test_nonzero_exit_reports_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    script = (
        "import sys\n"
        "sys.stdin.buffer.read()\n"
        "sys.stderr.write('Invalid data found when processing input')\n"
        "sys.exit(1)\n"
    )
    _use_command(monkeypatch, script)
    service = AudioTranscodeService()

    with pytest.raises(ValueError) as exc_info:
        await service.transcode(b"garbage", input_format="mp3", target_format="wav")

    assert "ffmpeg transcoding failed" in str(exc_info.value)
    assert "Invalid data found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_empty_output_is_an_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _use_command(monkeypatch, "import sys\nsys.stdin.buffer.read()\n")
    service = AudioTranscodeService()

    with pytest.raises(ValueError) as exc_info:
        await service.transcode(b"data", input_format="mp3", target_format="wav")

    assert "no output data" in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_binary_is_reported() -> None:
    service = AudioTranscodeService(ffmpeg_binary="/nonexistent/bin/ffmpeg")

    with pytest.raises(ValueError) as exc_info:
        await service.transcode(b"data", input_format="mp3", target_format="wav")

    assert "ffmpeg execution failed" in str(exc_info.value)


@pytest.mark.asyncio
async def test_cancellation_stops_a_hung_transcoder(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _use_command(monkeypatch, "import time\ntime.sleep(30)\n")
    service = AudioTranscodeService()
    spawned: list[asyncio.subprocess.Process] = []
    real_exec = asyncio.create_subprocess_exec

    async def recording_exec(*args, **kwargs):  # type: ignore[no-untyped-def]
        proc = await real_exec(*args, **kwargs)
        spawned.append(proc)
        return proc

    monkeypatch.setattr(asyncio, "create_subprocess_exec", recording_exec)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(
            service.transcode(b"data", input_format="mp3", target_format="wav"),
            timeout=1.0,
        )

    assert len(spawned) == 1
    proc = spawned[0]
    # The child was killed and reaped, not left sleeping.
    assert proc.returncode is not None
    assert proc.returncode != 0
    with pytest.raises(ProcessLookupError):
        os.kill(proc.pid, 0)


@requires_ffmpeg
@pytest.mark.asyncio
async def test_wav_to_mp3_and_back_with_real_ffmpeg(wav_bytes: bytes) -> None:
    service = AudioTranscodeService()

    mp3_bytes = await service.transcode(wav_bytes, input_format="wav", target_format="mp3")

    assert mp3_bytes
    assert mp3_bytes.startswith(b"ID3") or mp3_bytes[0] == 0xFF

    back = await service.transcode(mp3_bytes, input_format="mp3", target_format="wav")

    assert back.startswith(b"RIFF")
    assert b"WAVE" in back[8:16]
