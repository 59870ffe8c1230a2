"""Shared test fixtures for the longscribe test suite.

WHY: Several test modules need synthetic WAV containers, a two-chunk
transcript, and stand-ins for the ffmpeg and sherpa-onnx collaborators.
Centralizing them keeps every module on the same data.

HOW: Factory fixtures build WAV bytes with struct; FakeRecognizer and
FakeExtractor record their calls and can be told to fail on given
windows.

RULES:
- No fixture touches ffmpeg, ffprobe, the network, or a real model
- Fake extraction artifacts live under tmp_path and are deleted on exit
"""

import struct
from contextlib import contextmanager
from typing import List, Optional, Set

import pytest

from longscribe.core.ir import ChunkResult, RecognitionResult, Transcript
from longscribe.errors import ExtractionError, RecognitionError


def _chunk(chunk_id: bytes, payload: bytes) -> bytes:
    return chunk_id + struct.pack("<I", len(payload)) + payload


def build_wav(
    samples: List[int],
    sample_rate: int = 16000,
    channels: int = 1,
    bits: int = 16,
    audio_format: int = 1,
    extra_chunks: Optional[List[bytes]] = None,
    include_data: bool = True,
) -> bytes:
    """Assemble a RIFF/WAVE container around little-endian int16 samples."""
    block_align = channels * bits // 8
    fmt = struct.pack(
        "<HHIIHH",
        audio_format,
        channels,
        sample_rate,
        sample_rate * block_align,
        block_align,
        bits,
    )
    body = _chunk(b"fmt ", fmt)
    for extra in extra_chunks or []:
        body += extra
    if include_data:
        body += _chunk(b"data", struct.pack("<{}h".format(len(samples)), *samples))
    return b"RIFF" + struct.pack("<I", 4 + len(body)) + b"WAVE" + body


@pytest.fixture
def make_wav():
    """Factory building WAV bytes; see build_wav for parameters."""
    return build_wav


@pytest.fixture
def make_chunk():
    """Factory for raw RIFF sub-chunks (id + length + payload)."""
    return _chunk


@pytest.fixture
def two_chunk_transcript():
    """Two 60-second chunks with sentence-ending tokens."""
    first = ChunkResult(
        start_time=0.0,
        end_time=60.0,
        text="Hello world. Next sentence.",
        timestamps=[0.0, 0.4, 3.0, 3.5],
        tokens=["Hello", " world.", " Next", " sentence."],
    )
    second = ChunkResult(
        start_time=60.0,
        end_time=120.0,
        text="Goodbye now!",
        timestamps=[1.0, 1.5],
        tokens=["Goodbye", " now!"],
    )
    return Transcript(chunks=[first, second], duration_s=125.0, source_filename="talk.mp3")


class FakeExtractor:
    """Stands in for extract_chunk_wav; writes a placeholder file per window."""

    def __init__(self, tmp_path, fail_at: Optional[Set[float]] = None) -> None:
        self.tmp_path = tmp_path
        self.fail_at = fail_at or set()
        self.calls: List[tuple] = []
        self.created: List = []

    @contextmanager
    def __call__(self, audio_file, start, duration):
        self.calls.append((audio_file, start, duration))
        if start in self.fail_at:
            raise ExtractionError("ffmpeg: boom at {}".format(start))
        path = self.tmp_path / "chunk-{}.wav".format(len(self.calls))
        path.write_bytes(b"")
        self.created.append(path)
        try:
            yield path
        finally:
            path.unlink()


class FakeRecognizer:
    """Returns scripted results in call order; raises for listed call numbers."""

    def __init__(self, results: List[RecognitionResult], fail_calls: Optional[Set[int]] = None) -> None:
        self.results = list(results)
        self.fail_calls = fail_calls or set()
        self.paths: List = []

    def transcribe_file(self, path):
        self.paths.append(path)
        call = len(self.paths)
        assert path.exists(), "chunk file must exist while recognizing"
        if call in self.fail_calls:
            raise RecognitionError("decode failed on call {}".format(call))
        return self.results[call - 1]



@pytest.fixture
def fake_extractor(tmp_path):
    return FakeExtractor(tmp_path)


@pytest.fixture
def recognition_results() -> List[RecognitionResult]:
    return [
        RecognitionResult(text="first chunk.", tokens=["first", " chunk."], timestamps=[0.1, 0.6]),
        RecognitionResult(text="second chunk.", tokens=["second", " chunk."], timestamps=[0.2, 0.9]),
        RecognitionResult(text="third chunk.", tokens=["third", " chunk."], timestamps=[0.0, 0.5]),
    ]


class FakeClock:
    """Monotonic clock advancing by a fixed step on every read."""

    def __init__(self, step: float = 1.0) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recognizer_factory():
    return FakeRecognizer


@pytest.fixture
def extractor_factory(tmp_path):
    def _factory(fail_at=None):
        return FakeExtractor(tmp_path, fail_at=fail_at)
    return _factory

