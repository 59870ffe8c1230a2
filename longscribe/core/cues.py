"""Token-timestamp segmentation of a chunk into subtitle cues.

WHY: A recognized chunk can be a full minute of speech, far too long
for one caption. The recognizer's per-token timestamps let the chunk be
regrouped into short, sentence-shaped cues.

HOW: One greedy pass over tokens and timestamps in lock-step. A cue
starts at the timestamp of its first token and its end follows the
latest token. It is closed when a token ends a sentence or when the cue
spans more than MAX_CUE_SPAN_S seconds, whichever happens first.

RULES:
- The scan stops at min(len(tokens), len(timestamps))
- Token text is appended verbatim; the cue is trimmed only when closed
- Blank cues are never emitted
- A chunk with no tokens, or tokens but no timestamps, becomes one cue
  spanning the whole chunk, so its text still reaches the captions
- Cue times are relative to the chunk start
"""

from __future__ import annotations

from typing import List

from longscribe.config import MAX_CUE_SPAN_S
from longscribe.core.ir import ChunkResult, Cue

_SENTENCE_END = (".", "!", "?")


def is_sentence_end(token: str) -> bool:
    """True when the token, trimmed, ends with ``.``, ``!`` or ``?``."""
    return token.strip().endswith(_SENTENCE_END)


def segment_cues(chunk: ChunkResult) -> List[Cue]:
    """Regroup a chunk's tokens into subtitle cues.

    Args:
        chunk: A recognized chunk with co-indexed tokens and timestamps.

    Returns:
        Cues in time order, relative to chunk.start_time.
    """
    if not chunk.tokens or not chunk.timestamps:
        text = chunk.text.strip()
        if not text:
            return []
        return [Cue(start=0.0, end=chunk.end_time - chunk.start_time, text=text)]

    cues: List[Cue] = []
    current = Cue(start=0.0, end=0.0, text="")

    for token, timestamp in zip(chunk.tokens, chunk.timestamps):
        timestamp = float(timestamp)
        if current.text == "":
            current.start = timestamp

        current.text += token
        current.end = timestamp

        if is_sentence_end(token) or current.end - current.start > MAX_CUE_SPAN_S:
            current.text = current.text.strip()
            if current.text:
                cues.append(current)
            current = Cue(start=0.0, end=0.0, text="")

    # Flush the trailing partial cue
    current.text = current.text.strip()
    if current.text:
        cues.append(current)

    return cues
