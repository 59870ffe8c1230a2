"""Configuration constants, model locations, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Chunking thresholds, model file names, and binary
locations are plain data, not buried in logic, so the pipeline stages
share one source of truth.

HOW: python-dotenv loads the .env file on import. Constants are defined
at module level; anything environment-specific can be overridden via
environment variables.

RULES:
- Durations are float seconds everywhere
- All environment overrides are read once, at import time
- The model cache lives under $XDG_CACHE_HOME (fallback ~/.cache)
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the working directory (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Chunking and output defaults
# ---------------------------------------------------------------------------

DEFAULT_CHUNK_SIZE = 60
"""Default chunk window length in seconds."""

DEFAULT_FORMAT = "text"

MIN_CHUNK_SPAN_S = 0.5
"""Windows shorter than this are never extracted or recognized."""

MAX_CUE_SPAN_S = 5.0
"""A subtitle cue is closed once its span exceeds this many seconds."""

# ---------------------------------------------------------------------------
# Audio / recognizer parameters
# ---------------------------------------------------------------------------

TARGET_SAMPLE_RATE = 16000
FEATURE_DIM = 80
NUM_THREADS = int(os.getenv("LONGSCRIBE_NUM_THREADS", "4"))
PROVIDER = os.getenv("LONGSCRIBE_PROVIDER", "cpu")

FFMPEG_BINARY = os.getenv("LONGSCRIBE_FFMPEG", "ffmpeg")
FFPROBE_BINARY = os.getenv("LONGSCRIBE_FFPROBE", "ffprobe")

# ---------------------------------------------------------------------------
# Model acquisition
# ---------------------------------------------------------------------------

DEFAULT_MODEL_NAME = "sherpa-onnx-nemo-parakeet-tdt-0.6b-v3-int8"
MODEL_URL = os.getenv(
    "LONGSCRIBE_MODEL_URL",
    "https://github.com/k2-fsa/sherpa-onnx/releases/download/asr-models/"
    "{}.tar.bz2".format(DEFAULT_MODEL_NAME),
)

ENCODER_FILE = "encoder.int8.onnx"
DECODER_FILE = "decoder.int8.onnx"
JOINER_FILE = "joiner.int8.onnx"
TOKENS_FILE = "tokens.txt"

REQUIRED_MODEL_FILES = (ENCODER_FILE, DECODER_FILE, JOINER_FILE, TOKENS_FILE)


def model_env_path() -> str:
    """Return the explicit model directory from LONGSCRIBE_MODEL, or ""."""
    return os.getenv("LONGSCRIBE_MODEL", "").strip()


def cache_dir() -> Path:
    """Return the user cache root.

    RULES:
    - $XDG_CACHE_HOME wins when set
    - Otherwise ~/.cache, or a relative .cache when no home is resolvable
    """
    xdg = os.getenv("XDG_CACHE_HOME", "").strip()
    if xdg:
        return Path(xdg)
    try:
        return Path.home() / ".cache"
    except RuntimeError:
        return Path(".cache")


def colors_enabled(stream) -> bool:
    """True when ANSI colors should be written to *stream*.

    Colors are off when NO_COLOR is set or the stream is not a terminal.
    """
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())
