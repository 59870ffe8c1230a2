"""Longscribe: offline chunked transcription for long-form audio.

WHY: Speech recognition models handle a bounded amount of audio per call.
Hour-long recordings have to be cut into windows, recognized one at a
time, and stitched back into a single transcript that editors can use
as plain text, structured JSON, or WebVTT subtitles.

HOW: Four-stage pipeline: plan (chunk boundaries), extract (ffmpeg
renders each window as a mono 16 kHz PCM WAV), recognize (sherpa-onnx
Parakeet model), format (pluggable renderers). Each stage is
independently testable.

RULES:
- Chunks are processed strictly in order, one at a time
- A failing chunk is skipped, never fatal to the run
- All formatters consume the same Transcript IR
"""

__version__ = "0.1.0"
