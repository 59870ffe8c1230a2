"""Plain text transcript formatter.

WHY: The default output: one line of text that can be piped, grepped,
or pasted anywhere.

HOW: Every chunk text that is not blank is joined with a single space,
in chunk order, followed by a newline.

RULES:
- Chunk texts are joined as-is (not trimmed), blank ones are dropped
- Exactly one trailing newline
"""

from __future__ import annotations

from longscribe.core.ir import Transcript
from longscribe.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces the whole transcript as one line of text."""

    suffix = ".txt"

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, transcript: Transcript) -> FormatterOutput:
        return FormatterOutput(suffix=self.suffix, content=transcript.full_text() + "\n")
