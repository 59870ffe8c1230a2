"""Exception taxonomy for the transcription pipeline.

WHY: The orchestrator must tell apart failures that cost one chunk
(bad container, ffmpeg error, recognizer error) from failures that make
the whole run pointless (no duration, no model, no output file). Typed
exceptions make that split a single ``except ChunkError`` clause.

RULES:
- ChunkError subclasses are caught per chunk and never abort the run
- FatalSetupError subclasses abort the run with a non-zero exit status
- Every FormatError subclass names exactly one structural check
"""

from __future__ import annotations


class LongscribeError(Exception):
    """Base class for all errors raised by longscribe."""


class ChunkError(LongscribeError):
    """A failure confined to a single chunk window."""


class FormatError(ChunkError):
    """The audio container is malformed or uses an unsupported layout."""


class NotAWaveFileError(FormatError):
    """The RIFF or WAVE marker is missing or the header is truncated."""


class UnsupportedEncodingError(FormatError):
    """The fmt chunk declares an encoding other than uncompressed PCM."""


class UnsupportedChannelsError(FormatError):
    """The fmt chunk declares more (or fewer) than one channel."""


class UnsupportedBitDepthError(FormatError):
    """The fmt chunk declares a sample width other than 16 bits."""


class MissingDataChunkError(FormatError):
    """The container ended before a data chunk was found."""


class ExtractionError(ChunkError):
    """ffmpeg could not render a chunk window.

    The message carries ffmpeg's own diagnostic output.
    """


class RecognitionError(ChunkError):
    """The speech recognizer failed or returned an unusable result."""


class FatalSetupError(LongscribeError):
    """Duration probe, model, recognizer, or output sink failure."""


class ModelDownloadError(FatalSetupError):
    """The model archive could not be downloaded or extracted."""
