"""Abstract base formatter and output container.

WHY: Every output format consumes the same Transcript IR but produces
different document content. A shared base class lets the CLI pick any
formatter by name and handle its output generically.

HOW: BaseFormatter is an ABC with a ``name`` property, a ``suffix``
class attribute and a ``format()`` method. FormatterOutput bundles the
suffix with the rendered text.

RULES:
- Subclasses MUST implement ``name`` and ``format()`` and set ``suffix``
- ``format()`` is a pure function of the Transcript
- ``suffix`` starts with a dot, e.g. ``".vtt"``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from longscribe.core.ir import Transcript


@dataclass
class FormatterOutput:
    """One rendered document.

    Attributes:
        suffix: File suffix used when the output is written into a
                directory, e.g. ``".json"`` → ``"interview.json"``.
        content: The complete document text.
    """

    suffix: str
    content: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter, set ``suffix``
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    suffix = ".txt"

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'WebVTT'."""

    @abstractmethod
    def format(self, transcript: Transcript) -> FormatterOutput:
        """Render the Transcript IR into a complete document."""
