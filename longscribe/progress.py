"""Terminal progress bar and ETA rendering for the chunk loop.

WHY: Transcribing an hour of audio takes minutes. Users need to see how
many chunks are done, how long the rest will take, and which chunks
failed, without any of it reaching stdout, which may carry the
transcript itself.

HOW: Pure rendering helpers (bar, ETA text, line layout) plus a small
ProgressReporter that writes carriage-return-updated lines to stderr,
sizes the bar to the terminal, and hides the cursor while active.

RULES:
- Negative ETAs display as "0s" (clamped, not suppressed)
- Error lines end with a newline so they stay visible; progress lines
  are overwritten in place
- Colors only when the stream is a TTY and NO_COLOR is unset
"""

from __future__ import annotations

import shutil
import sys
from typing import Optional, TextIO

from longscribe.config import colors_enabled

DEFAULT_BAR_WIDTH = 40
MIN_BAR_WIDTH = 10

_FILLED = "█"
_EMPTY = "░"

_DIM = "\033[2m"
_GRAY = "\033[38;5;250m"
_RESET = "\033[0m"
_CLEAR_EOL = "\033[K"
_HIDE_CURSOR = "\033[?25l"
_SHOW_CURSOR = "\033[?25h"


def render_progress_bar(current: int, total: int, width: int) -> str:
    """Return a bar of *width* cells with current/total of them filled."""
    if total <= 0:
        return ""
    filled = min((current * width) // total, width)
    return _FILLED * filled + _EMPTY * (width - filled)


def format_eta(seconds: float) -> str:
    """Format a duration as "1m 23s" or "45s"; negative values show "0s"."""
    if seconds < 0:
        return "0s"
    minutes = int(seconds // 60)
    secs = int(seconds) % 60
    if minutes > 0:
        return "{}m {}s".format(minutes, secs)
    return "{}s".format(secs)


def estimate_eta(elapsed: float, current: int, total: int) -> float:
    """Linear extrapolation: ``elapsed / (current / total) - elapsed``.

    Recomputed from scratch on every call, no smoothing. The result may
    be negative; format_eta clamps it for display.
    """
    if total <= 0 or current <= 0:
        return 0.0
    percent = current / total
    return elapsed / percent - elapsed


def bar_width_for(eta_text: str, columns: int) -> int:
    """Fit the bar into *columns*, leaving room for " ETA <eta_text>"."""
    if columns <= 0:
        return DEFAULT_BAR_WIDTH
    reserved = 1 + len("ETA ") + len(eta_text)
    return max(columns - reserved, MIN_BAR_WIDTH)


class ProgressReporter:
    """Writes the chunk progress line to a terminal stream.

    Use as a context manager so the cursor is restored on every exit
    path::

        with ProgressReporter() as progress:
            progress.update(1, 3, eta=12.0)
    """

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None) -> None:
        self.stream = stream if stream is not None else sys.stderr
        self.color = colors_enabled(self.stream) if color is None else color
        self._isatty = bool(getattr(self.stream, "isatty", None) and self.stream.isatty())

    def __enter__(self) -> ProgressReporter:
        if self._isatty:
            self._write(_HIDE_CURSOR)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._isatty:
            self._write(_SHOW_CURSOR)

    def _columns(self) -> int:
        if not self._isatty:
            return 0
        return shutil.get_terminal_size(fallback=(0, 0)).columns

    def _paint(self, text: str, code: str) -> str:
        if not self.color:
            return text
        return "{}{}{}".format(code, text, _RESET)

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def render_line(self, current: int, total: int, eta: float) -> str:
        """The in-place progress line: ``\\r<bar> ETA <eta>``."""
        eta_text = format_eta(eta)
        bar = render_progress_bar(current, total, bar_width_for(eta_text, self._columns()))
        clear = _CLEAR_EOL if self._isatty else ""
        return "\r{} {}{}".format(
            self._paint(bar, _GRAY), self._paint("ETA " + eta_text, _DIM), clear
        )

    def render_error_line(self, current: int, total: int, elapsed: float, error: BaseException) -> str:
        """Progress line with the chunk's error appended inline.

        The ETA slot carries *elapsed*, the run time so far, so the line
        records when the chunk failed.
        """
        eta_text = format_eta(elapsed)
        bar = render_progress_bar(current, total, bar_width_for(eta_text, self._columns()))
        return "\r{} {}\n".format(
            self._paint(bar, _GRAY),
            self._paint("ETA {} ERR: {}".format(eta_text, error), _DIM),
        )

    def update(self, current: int, total: int, eta: float) -> None:
        self._write(self.render_line(current, total, eta))

    def error(self, current: int, total: int, elapsed: float, error: BaseException) -> None:
        self._write(self.render_error_line(current, total, elapsed, error))

    def finish(self, total: int) -> None:
        """Draw the full bar with a zero ETA and end the line."""
        self._write(self.render_line(total, total, 0.0) + "\n")
