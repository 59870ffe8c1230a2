"""Command-line interface for longscribe.

WHY: Users need one command that turns a long recording into a
transcript: ``longscribe talk.mp3``. The CLI wires together model
resolution, the recognizer, the duration probe, boundary planning, the
chunk loop, and the chosen formatter.

HOW: argparse reads the audio file, chunk size, format, and output
target. The recognizer is acquired in a ``with`` block so it is
released exactly once on every exit path. Status lines and the progress
bar go to stderr; the transcript goes to stdout unless ``--output`` is
given.

RULES:
- Positional argument: the audio/video file path
- --chunk-size must be a positive integer (seconds)
- --format: text, json or vtt (case-insensitive)
- --output naming an existing directory writes {stem}{suffix} inside it,
  with a numeric suffix on conflict (talk-2.vtt)
- Per-chunk failures never change the exit status
- FatalSetupError → exit 1, Ctrl-C → exit 130, usage error → exit 2
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from longscribe import __version__
from longscribe.asr import Recognizer, RecognizerConfig, get_model_path
from longscribe.config import DEFAULT_CHUNK_SIZE, DEFAULT_FORMAT, colors_enabled
from longscribe.core.boundaries import plan_boundaries
from longscribe.core.ir import Transcript
from longscribe.core.orchestrator import transcribe_audio
from longscribe.errors import FatalSetupError
from longscribe.formatters import FORMATTERS
from longscribe.formatters.base import FormatterOutput
from longscribe.media import probe_duration

logger = logging.getLogger(__name__)

_BOLD = "\033[1m"
_DIM = "\033[2m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    Status output must not pollute stdout so the transcript can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _paint(text: str, code: str) -> str:
    if not colors_enabled(sys.stderr):
        return text
    return "{}{}{}".format(code, text, _RESET)


def _load_recognizer() -> Recognizer:
    """Resolve the model directory and load the recognizer.

    Raises:
        FatalSetupError: The model is missing and cannot be fetched, or
            the engine failed to load it.
    """
    _status("Loading model...")
    model_path = get_model_path(on_status=_status)
    recognizer = Recognizer(RecognizerConfig(model_path=model_path))
    _status("Model loaded!")
    return recognizer


def realtime_factor(duration: float, elapsed: float) -> float:
    """Audio seconds transcribed per wall-clock second."""
    if elapsed <= 0:
        return float("inf")
    return duration / elapsed


def _report_speed(duration: float, elapsed: float) -> None:
    factor = realtime_factor(duration, elapsed)
    color = _GREEN if factor >= 10 else _YELLOW
    _status("Processed in {} {}\n".format(
        _paint("{:.1f}s".format(elapsed), _BOLD),
        _paint("({} realtime)".format(_paint("{:.1f}x".format(factor), color)), _DIM),
    ))


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Return ``{stem}{suffix}`` in *output_dir*, numbered on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. talk.vtt)
    - Conflict: counter inserted before the suffix (talk-2.vtt, talk-3.vtt)
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(stem, counter, suffix)
        if not candidate.exists():
            return candidate
        counter += 1


def _write_output(output: FormatterOutput, target: Optional[str], stem: str, stdout: TextIO) -> Optional[Path]:
    """Write the rendered document to stdout or to a newly created file.

    Returns:
        The path written, or None when the document went to stdout.

    Raises:
        FatalSetupError: The output file could not be created.
    """
    if not target:
        stdout.write(output.content)
        stdout.flush()
        return None

    path = Path(target)
    if path.is_dir():
        path = _resolve_output_path(stem, output.suffix, path)

    try:
        with open(path, "w", encoding="utf-8") as f:
            _status("Output: {}".format(path))
            f.write(output.content)
    except OSError as e:
        raise FatalSetupError("error creating output file: {}".format(e)) from e
    return path


def run(args: argparse.Namespace, stdout: Optional[TextIO] = None) -> int:
    """Execute the full transcription pipeline and return the exit status.

    RULES:
    - The recognizer is closed before formatting, on success or failure
    - A missing input file is reported before the model is loaded
    """
    stdout = stdout if stdout is not None else sys.stdout
    audio_path = Path(args.input_file)

    if not audio_path.is_file():
        print("Error: File not found: {}".format(audio_path), file=sys.stderr)
        return 1

    try:
        with _load_recognizer() as recognizer:
            duration = probe_duration(audio_path)
            boundaries = plan_boundaries(duration, args.chunk_size)
            _status("audio: {:.1f}s {} chunks: {}s {} format: {}".format(
                duration, _paint("•", _DIM), args.chunk_size, _paint("•", _DIM), args.format,
            ))
            results, elapsed = transcribe_audio(recognizer, audio_path, boundaries)

        _report_speed(duration, elapsed)

        transcript = Transcript(
            chunks=results,
            duration_s=duration,
            source_filename=audio_path.name,
        )
        formatter = FORMATTERS[args.format]()
        _status("Running {} formatter...".format(formatter.name))
        output = formatter.format(transcript)
        _write_output(output, args.output, Path(transcript.source_filename).stem, stdout)

    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        return 130
    except FatalSetupError as e:
        logger.error("Setup failure: %s", e, exc_info=getattr(args, "verbose", False))
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    return 0


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid int value: {!r}".format(value))
    if number <= 0:
        raise argparse.ArgumentTypeError("chunk size must be positive, got {}".format(number))
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Kept separate from main() so tests can inspect the parser without
    running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="longscribe",
        description="Transcribe long audio/video files offline in fixed-size chunks "
                    "and write plain text, JSON, or WebVTT.",
        epilog="examples:\n"
               "  longscribe audio.mp3                     # 60s chunks, text output\n"
               "  longscribe -c 30 talk.mp3                # 30s chunks\n"
               "  longscribe -f vtt -o subs.vtt audio.mp3  # WebVTT to file\n\n"
               "environment:\n"
               "  LONGSCRIBE_MODEL  path to model dir (optional, auto-downloaded if not set)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "input_file",
        help="Path to the audio or video file to transcribe.",
    )

    parser.add_argument(
        "-c", "--chunk-size",
        type=_positive_int,
        default=DEFAULT_CHUNK_SIZE,
        help="Chunk size in seconds (default: %(default)s).",
    )

    parser.add_argument(
        "-f", "--format",
        type=str.lower,
        choices=sorted(FORMATTERS.keys()),
        default=DEFAULT_FORMAT,
        help="Output format (default: %(default)s).",
    )

    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file, or an existing directory (default: stdout).",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug details (ffmpeg commands, skipped chunks) to stderr.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=__version__,
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
