"""Decoder for mono 16-bit PCM WAV containers.

WHY: ffmpeg renders every chunk as a RIFF/WAVE file. Reading it needs
nothing more than walking the RIFF chunk list, so no audio library is
pulled in and the decoded buffer is a plain numpy array with no native
handle to release.

HOW: After checking the RIFF and WAVE markers, sub-chunks are walked by
their 4-byte id and 4-byte little-endian length. ``fmt `` is validated,
``data`` is decoded and returned immediately, anything else (LIST, INFO,
fact, ...) is skipped by its declared length.

RULES:
- Only PCM (format tag 1), one channel, 16 bits per sample
- Byte rate and block align are never validated
- Samples are int16 / 32768.0 as float32
- Nothing after the data chunk is read
- Each structural failure raises its own FormatError subclass
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Union

import numpy as np

from longscribe.core.ir import Wave
from longscribe.errors import (
    FormatError,
    MissingDataChunkError,
    NotAWaveFileError,
    UnsupportedBitDepthError,
    UnsupportedChannelsError,
    UnsupportedEncodingError,
)

_RIFF_HEADER = struct.Struct("<4sI4s")
_CHUNK_HEADER = struct.Struct("<4sI")
_FMT_FIELDS = struct.Struct("<HHIIHH")

WAVE_FORMAT_PCM = 1


def _marker(raw: bytes) -> str:
    return raw.decode("latin-1")


def decode_wave(data: bytes) -> Wave:
    """Decode a complete WAV container held in memory.

    Args:
        data: The container bytes, starting at the RIFF marker.

    Returns:
        A Wave whose sample count is the data chunk size divided by two.

    Raises:
        FormatError: A subclass naming the structural check that failed.
    """
    if len(data) < _RIFF_HEADER.size:
        raise NotAWaveFileError(
            "not a valid WAV file (header too short: {} bytes)".format(len(data))
        )

    riff, _, wave = _RIFF_HEADER.unpack_from(data, 0)
    if riff != b"RIFF":
        raise NotAWaveFileError(
            "not a valid WAV file (no RIFF header), got: {!r}".format(_marker(riff))
        )
    if wave != b"WAVE":
        raise NotAWaveFileError(
            "not a valid WAV file (no WAVE format), got: {!r}".format(_marker(wave))
        )

    offset = _RIFF_HEADER.size
    sample_rate = None

    while True:
        remaining = len(data) - offset
        if remaining == 0:
            raise MissingDataChunkError("no data chunk found in WAV file")
        if remaining < _CHUNK_HEADER.size:
            raise FormatError("truncated chunk header at byte {}".format(offset))

        chunk_id, chunk_size = _CHUNK_HEADER.unpack_from(data, offset)
        offset += _CHUNK_HEADER.size

        if chunk_id == b"fmt ":
            if chunk_size < _FMT_FIELDS.size or offset + chunk_size > len(data):
                raise FormatError("truncated fmt chunk ({} bytes)".format(chunk_size))
            audio_format, channels, rate, _, _, bits = _FMT_FIELDS.unpack_from(data, offset)
            if audio_format != WAVE_FORMAT_PCM:
                raise UnsupportedEncodingError(
                    "unsupported audio format: {} (only PCM supported)".format(audio_format)
                )
            if channels != 1:
                raise UnsupportedChannelsError(
                    "unsupported number of channels: {} (only mono supported)".format(channels)
                )
            if bits != 16:
                raise UnsupportedBitDepthError(
                    "unsupported bits per sample: {} (only 16-bit supported)".format(bits)
                )
            sample_rate = rate

        elif chunk_id == b"data":
            if sample_rate is None:
                raise FormatError("data chunk precedes fmt chunk")
            if offset + chunk_size > len(data):
                raise FormatError(
                    "truncated data chunk: declared {} bytes, {} available".format(
                        chunk_size, len(data) - offset
                    )
                )
            return _read_samples(data[offset:offset + chunk_size], sample_rate)

        # Unknown chunks (LIST, INFO, fact, ...) are skipped by length
        offset += chunk_size
        if offset > len(data):
            raise MissingDataChunkError("no data chunk found in WAV file")


def _read_samples(payload: bytes, sample_rate: int) -> Wave:
    count = len(payload) // 2
    if count == 0:
        return Wave(samples=np.zeros(0, dtype=np.float32), sample_rate=sample_rate)
    pcm = np.frombuffer(payload, dtype="<i2", count=count)
    samples = pcm.astype(np.float32) / np.float32(32768.0)
    return Wave(samples=samples, sample_rate=sample_rate)


def read_wave(path: Union[str, Path]) -> Wave:
    """Read and decode a WAV file from disk.

    Raises:
        FormatError: If the file cannot be read or fails a structural check.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise FormatError("failed to open file: {}".format(e)) from e
    return decode_wave(data)
