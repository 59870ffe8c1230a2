"""Output formatter registry.

WHY: The CLI needs a single lookup to find the right formatter by the
name given to ``--format``.

HOW: FORMATTERS maps format names to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["vtt"]()``.

RULES:
- Keys are the lowercase names accepted by ``--format``
- Values are BaseFormatter subclasses
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Type

from longscribe.formatters.json_output import JSONFormatter
from longscribe.formatters.plain_text import PlainTextFormatter
from longscribe.formatters.webvtt import WebVTTFormatter

if TYPE_CHECKING:
    from longscribe.formatters.base import BaseFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "text": PlainTextFormatter,
    "json": JSONFormatter,
    "vtt": WebVTTFormatter,
}
