"""ffprobe / ffmpeg collaborators: duration probe and chunk extraction.

WHY: Sources arrive in any container ffmpeg understands (mp3, m4a, mp4,
mkv, ...). The recognizer only accepts mono 16 kHz PCM, so every chunk
window is rendered to a temporary WAV by ffmpeg before decoding.

HOW: probe_duration() asks ffprobe for ``format=duration``.
extract_chunk_wav() is a context manager: it creates a fresh temporary
directory, runs ffmpeg for exactly ``[start, start + duration)`` and
yields the WAV path; the directory is removed when the block exits,
whether it exits normally or by exception.

RULES:
- Probe failures are fatal to the run (FatalSetupError)
- Extraction failures cost one chunk (ExtractionError with ffmpeg output)
- No temporary artifact outlives its chunk
"""

from __future__ import annotations

import logging
import math
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Union

from longscribe.config import FFMPEG_BINARY, FFPROBE_BINARY, TARGET_SAMPLE_RATE
from longscribe.errors import ExtractionError, FatalSetupError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def probe_duration(audio_file: PathLike) -> float:
    """Return the duration of *audio_file* in seconds.

    Raises:
        FatalSetupError: ffprobe is missing, fails, or prints no number.
    """
    cmd = [
        FFPROBE_BINARY,
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(audio_file),
    ]
    logger.debug("Probing duration: %s", " ".join(cmd))

    try:
        result = subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise FatalSetupError("ffprobe not found: {}".format(e)) from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or str(e)
        raise FatalSetupError("failed to get duration: {}".format(detail)) from e

    raw = result.stdout.strip()
    try:
        duration = float(raw)
    except ValueError as e:
        raise FatalSetupError(
            "failed to get duration: unexpected ffprobe output {!r}".format(raw)
        ) from e
    if not math.isfinite(duration) or duration < 0:
        raise FatalSetupError("failed to get duration: unusable value {!r}".format(raw))
    return duration


def build_extract_command(
    audio_file: PathLike,
    chunk_file: PathLike,
    start: float,
    duration: float,
) -> List[str]:
    """The ffmpeg command rendering one window as mono 16 kHz PCM16 WAV."""
    return [
        FFMPEG_BINARY,
        "-ss", "{:.3f}".format(start),
        "-t", "{:.3f}".format(duration),
        "-i", str(audio_file),
        "-vn",
        "-ar", str(TARGET_SAMPLE_RATE),
        "-ac", "1",
        "-acodec", "pcm_s16le",
        "-y",
        str(chunk_file),
    ]


@contextmanager
def extract_chunk_wav(audio_file: PathLike, start: float, duration: float) -> Iterator[Path]:
    """Render ``[start, start + duration)`` to a temporary WAV and yield its path.

    Raises:
        ExtractionError: The temp directory could not be created or
            ffmpeg failed; the message carries ffmpeg's output.
    """
    try:
        tmp = tempfile.TemporaryDirectory(prefix="longscribe-")
    except OSError as e:
        raise ExtractionError("failed to create temp dir: {}".format(e)) from e

    with tmp as tmp_dir:
        chunk_file = Path(tmp_dir) / "chunk.wav"
        cmd = build_extract_command(audio_file, chunk_file, start, duration)
        logger.debug("Extracting chunk: %s", " ".join(cmd))

        try:
            subprocess.run(
                cmd,
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise ExtractionError("ffmpeg not found: {}".format(e)) from e
        except subprocess.CalledProcessError as e:
            output = e.stdout.decode(errors="replace").strip() if e.stdout else str(e)
            raise ExtractionError("ffmpeg: {}".format(output)) from e

        yield chunk_file
