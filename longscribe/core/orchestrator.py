"""The sequential extract → decode → recognize loop.

WHY: This is where a long file becomes a transcript. Every planned window
is rendered to WAV, recognized, and collected in order, while the user
watches a progress bar with an ETA. One bad window must never cost the
whole run.

HOW: Windows are taken from adjacent cut-points in order. For each one,
the extraction collaborator yields a temporary WAV (deleted when the
``with`` block exits) and the recognizer's transcribe_file() decodes and
recognizes it. A ChunkError at any step is rendered inline on the
progress stream and the loop moves on.

RULES:
- Strictly sequential; results come out in boundary order
- Windows shorter than MIN_CHUNK_SPAN_S are never extracted
- Only ChunkError is caught per chunk; anything else propagates
- ETA = elapsed / (done / total) - elapsed, recomputed each chunk
- An error line shows the time elapsed so far in place of the ETA
- The recognizer is borrowed, not owned: the caller closes it
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, ContextManager, List, Optional, Sequence, Tuple, Union

from longscribe.core.boundaries import window_is_schedulable
from longscribe.core.ir import ChunkResult, RecognitionResult
from longscribe.errors import ChunkError
from longscribe.media import extract_chunk_wav
from longscribe.progress import ProgressReporter, estimate_eta

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Extractor = Callable[[PathLike, float, float], ContextManager[Path]]


def transcribe_chunk(
    recognizer,
    audio_file: PathLike,
    start: float,
    duration: float,
    extract: Extractor = extract_chunk_wav,
) -> RecognitionResult:
    """Extract one window to a temporary WAV and recognize it.

    Args:
        recognizer: Anything with ``transcribe_file(path) -> RecognitionResult``.
        audio_file: The source media file.
        start: Window start in seconds.
        duration: Window length in seconds.
        extract: Context manager factory yielding the chunk WAV path.

    Raises:
        ChunkError: Extraction, decoding, or recognition failed.
    """
    with extract(audio_file, start, duration) as chunk_file:
        return recognizer.transcribe_file(chunk_file)


def transcribe_audio(
    recognizer,
    audio_file: PathLike,
    boundaries: Sequence[float],
    extract: Extractor = extract_chunk_wav,
    progress: Optional[ProgressReporter] = None,
    clock: Callable[[], float] = time.monotonic,
) -> Tuple[List[ChunkResult], float]:
    """Transcribe every window between adjacent *boundaries*.

    Args:
        recognizer: Loaded recognizer (see transcribe_chunk).
        audio_file: The source media file.
        boundaries: Cut-points from plan_boundaries().
        extract: Extraction collaborator, replaceable in tests.
        progress: Progress reporter; defaults to one on stderr.
        clock: Monotonic clock in seconds.

    Returns:
        ``(results, elapsed)``: the surviving chunks in order and the
        wall-clock seconds spent on the whole loop.
    """
    if progress is None:
        progress = ProgressReporter()

    start_time = clock()
    total = len(boundaries) - 1
    results: List[ChunkResult] = []

    with progress:
        for i in range(total):
            chunk_start = boundaries[i]
            chunk_end = boundaries[i + 1]
            if not window_is_schedulable(chunk_start, chunk_end):
                logger.debug("Skipping %.3fs window at %.3fs", chunk_end - chunk_start, chunk_start)
                continue

            elapsed = clock() - start_time
            eta = estimate_eta(elapsed, i + 1, total)
            progress.update(i + 1, total, eta)

            try:
                result = transcribe_chunk(
                    recognizer, audio_file, chunk_start, chunk_end - chunk_start, extract=extract
                )
            except ChunkError as e:
                logger.info("Chunk %d/%d (%.1fs-%.1fs) skipped: %s", i + 1, total, chunk_start, chunk_end, e)
                progress.error(i + 1, total, clock() - start_time, e)
                continue

            results.append(ChunkResult(
                start_time=chunk_start,
                end_time=chunk_end,
                text=result.text,
                timestamps=list(result.timestamps),
                tokens=list(result.tokens),
            ))

        if total > 0:
            progress.finish(total)

    return results, clock() - start_time
