"""sherpa-onnx offline recognizer with explicit, one-shot release.

WHY: The Parakeet TDT model is a NeMo transducer run by sherpa-onnx. The
loaded session is a large native resource; it is created once per run,
used for one chunk at a time, and released exactly once when the run
ends, never left to garbage collection.

HOW: Recognizer wraps ``sherpa_onnx.OfflineRecognizer.from_transducer``.
transcribe_file() decodes the chunk WAV with the pure-Python decoder,
feeds the samples through a fresh offline stream and returns text,
tokens and per-token timestamps. The class is a context manager whose
exit calls close().

RULES:
- Use as: with Recognizer(RecognizerConfig(model_path)) as recognizer: ...
- close() is idempotent; using a closed recognizer raises RecognitionError
- Engine exceptions are wrapped as RecognitionError (chunk-fatal only)
- Creation failures raise FatalSetupError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
import sherpa_onnx

from longscribe.config import (
    DECODER_FILE,
    ENCODER_FILE,
    FEATURE_DIM,
    JOINER_FILE,
    NUM_THREADS,
    PROVIDER,
    TARGET_SAMPLE_RATE,
    TOKENS_FILE,
)
from longscribe.core.ir import RecognitionResult
from longscribe.core.wav import read_wave
from longscribe.errors import FatalSetupError, RecognitionError

logger = logging.getLogger(__name__)


@dataclass
class RecognizerConfig:
    """Engine settings; defaults come from longscribe.config."""

    model_path: Path
    num_threads: int = NUM_THREADS
    sample_rate: int = TARGET_SAMPLE_RATE
    feature_dim: int = FEATURE_DIM
    provider: str = PROVIDER


class Recognizer:
    """Exclusively owned handle on a loaded sherpa-onnx model."""

    def __init__(self, config: RecognizerConfig) -> None:
        self.config = config
        model_path = Path(config.model_path)
        logger.debug("Loading model from %s", model_path)
        try:
            self._recognizer = sherpa_onnx.OfflineRecognizer.from_transducer(
                encoder=str(model_path / ENCODER_FILE),
                decoder=str(model_path / DECODER_FILE),
                joiner=str(model_path / JOINER_FILE),
                tokens=str(model_path / TOKENS_FILE),
                num_threads=config.num_threads,
                sample_rate=config.sample_rate,
                feature_dim=config.feature_dim,
                decoding_method="greedy_search",
                provider=config.provider,
                model_type="nemo_transducer",
            )
        except Exception as e:
            raise FatalSetupError("failed to load model: {}".format(e)) from e

        if self._recognizer is None:
            raise FatalSetupError("failed to create recognizer")

    def __enter__(self) -> Recognizer:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()

    @property
    def closed(self) -> bool:
        return self._recognizer is None

    def transcribe_samples(self, samples: np.ndarray, sample_rate: int) -> RecognitionResult:
        """Recognize one chunk of normalized mono samples."""
        if self._recognizer is None:
            raise RecognitionError("recognizer not initialized")

        try:
            stream = self._recognizer.create_stream()
            stream.accept_waveform(sample_rate, samples)
            self._recognizer.decode_stream(stream)
            result = stream.result
        except Exception as e:
            raise RecognitionError("recognition failed: {}".format(e)) from e

        text = result.text
        if text is None:
            raise RecognitionError("recognizer returned no text")

        try:
            return RecognitionResult(
                text=str(text),
                tokens=[str(t) for t in result.tokens],
                timestamps=[float(t) for t in result.timestamps],
            )
        except (TypeError, ValueError) as e:
            raise RecognitionError("recognizer returned an unusable result: {}".format(e)) from e

    def transcribe_file(self, audio_path: Union[str, Path]) -> RecognitionResult:
        """Decode a mono 16-bit PCM WAV and recognize it.

        Raises:
            FormatError: The file is not a usable WAV container.
            RecognitionError: The engine failed.
        """
        wave = read_wave(audio_path)
        return self.transcribe_samples(wave.samples, wave.sample_rate)

    def close(self) -> None:
        """Release the native session. Safe to call more than once."""
        if self._recognizer is not None:
            logger.debug("Releasing recognizer")
            self._recognizer = None
