"""Structured JSON formatter.

WHY: Downstream tooling wants the transcript together with its chunk
timing and the raw token/timestamp arrays, e.g. to re-segment captions
or align against video.

HOW: Builds a dict with the source duration, the chunk count, the
joined text and the serialized chunks, then dumps it with two-space
indentation. The shape is described by transcript_schema.json in this
package.

RULES:
- ``chunks`` counts ChunkResults, not cues
- ``text`` equals the plain text formatter's output without the newline
- ``chunk_data`` is omitted entirely when there are no chunks
- ``chunk_data`` entries use StartTime, EndTime, Text, Timestamps, Tokens
- Non-ASCII text is written as-is (ensure_ascii=False)
"""

from __future__ import annotations

import json
from typing import Any, Dict

from longscribe.core.ir import Transcript
from longscribe.formatters.base import BaseFormatter, FormatterOutput


def build_document(transcript: Transcript) -> Dict[str, Any]:
    """Return the JSON document as a plain dict."""
    document: Dict[str, Any] = {
        "duration_seconds": transcript.duration_s,
        "chunks": len(transcript.chunks),
        "text": transcript.full_text(),
    }
    if transcript.chunks:
        document["chunk_data"] = [chunk.to_dict() for chunk in transcript.chunks]
    return document


class JSONFormatter(BaseFormatter):
    """Formatter that produces the transcript with per-chunk metadata."""

    suffix = ".json"

    @property
    def name(self) -> str:
        return "JSON"

    def format(self, transcript: Transcript) -> FormatterOutput:
        content = json.dumps(build_document(transcript), indent=2, ensure_ascii=False)
        return FormatterOutput(suffix=self.suffix, content=content + "\n")
