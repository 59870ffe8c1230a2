"""WebVTT subtitle formatter.

WHY: Video players and editors load WebVTT directly. Captions need
absolute times on the source timeline and short, sentence-shaped text,
which the recognizer's token timestamps make possible.

HOW: Each chunk is segmented into cues by segment_cues(); cue times are
shifted by the chunk's start time and written as numbered blocks after
a ``WEBVTT`` header.

RULES:
- Cue numbers start at 1 and run across the whole transcript
- Timing lines use HH:MM:SS.mmm, zero-padded, rounded to milliseconds
- Blank cues are skipped and do not consume a number
- Every cue block ends with a blank line
"""

from __future__ import annotations

from typing import List

from longscribe.core.cues import segment_cues
from longscribe.core.ir import Transcript
from longscribe.formatters.base import BaseFormatter, FormatterOutput


def format_vtt_time(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS.mmm``; negative input clamps to zero."""
    total_ms = max(int(round(seconds * 1000)), 0)
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return "{:02d}:{:02d}:{:02d}.{:03d}".format(hours, minutes, secs, millis)


class WebVTTFormatter(BaseFormatter):
    """Formatter that produces numbered WebVTT cues."""

    suffix = ".vtt"

    @property
    def name(self) -> str:
        return "WebVTT"

    def format(self, transcript: Transcript) -> FormatterOutput:
        lines: List[str] = ["WEBVTT", ""]
        cue_number = 1

        for chunk in transcript.chunks:
            for cue in segment_cues(chunk):
                if not cue.text.strip():
                    continue
                start = chunk.start_time + cue.start
                end = chunk.start_time + cue.end
                lines.append(str(cue_number))
                lines.append("{} --> {}".format(format_vtt_time(start), format_vtt_time(end)))
                lines.append(cue.text)
                lines.append("")
                cue_number += 1

        return FormatterOutput(suffix=self.suffix, content="\n".join(lines) + "\n")
