"""Intermediate representation dataclasses for chunked transcripts.

WHY: The recognizer returns text plus parallel token/timestamp arrays for
each chunk, relative to that chunk's start. Formatters (text, JSON,
WebVTT) each need the same per-chunk data in different shapes. The IR
gives them one well-typed form to consume.

HOW: Five dataclasses:
  Wave             : decoded mono samples and their sample rate
  RecognitionResult: what the recognizer returns for one chunk
  ChunkResult      : a recognized chunk placed on the source timeline
  Cue              : one subtitle caption, relative to its chunk
  Transcript       : the ordered chunk results for one source file

RULES:
- All times are float seconds
- ChunkResult.start_time/end_time are absolute; timestamps are relative
  to start_time
- tokens[i] pairs with timestamps[i]; either list may be the shorter one
- ChunkResult is frozen once created
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np


@dataclass
class Wave:
    """Decoded audio: normalized float32 samples in [-1.0, 1.0].

    Built once per chunk by the WAV decoder, handed to the recognizer,
    then dropped.
    """

    samples: np.ndarray
    sample_rate: int


@dataclass
class RecognitionResult:
    """Raw recognizer output for one chunk."""

    text: str
    tokens: List[str] = field(default_factory=list)
    timestamps: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class ChunkResult:
    """One chunk's transcription, placed on the source timeline.

    RULES:
    - start_time < end_time, both absolute seconds in the source file
    - timestamps are per-token offsets relative to start_time
    - tokens and timestamps are co-indexed
    """

    start_time: float
    end_time: float
    text: str
    timestamps: List[float] = field(default_factory=list)
    tokens: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for ``chunk_data``; keys keep the field names in PascalCase."""
        return {
            "StartTime": self.start_time,
            "EndTime": self.end_time,
            "Text": self.text,
            "Timestamps": [float(t) for t in self.timestamps],
            "Tokens": list(self.tokens),
        }


@dataclass
class Cue:
    """A subtitle caption; start/end are relative to the chunk start."""

    start: float
    end: float
    text: str


@dataclass
class Transcript:
    """The complete transcript of one source file.

    RULES:
    - chunks are in non-decreasing start_time order
    - duration_s is the probed duration of the source, not the sum of chunks
    - source_filename is used to name output files
    """

    chunks: List[ChunkResult]
    duration_s: float
    source_filename: str = ""

    def full_text(self) -> str:
        """Join every chunk text that is not blank, separated by one space."""
        return " ".join(c.text for c in self.chunks if c.text.strip())
