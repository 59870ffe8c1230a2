"""Core chunked-transcription modules.

WHY: The core package holds the only algorithmic parts of longscribe:
boundary planning, WAV decoding, the orchestration loop, and cue
segmentation. Everything else is a thin shell around them.

HOW: ir.py defines the data structures, boundaries.py plans chunk
windows, wav.py decodes PCM containers, orchestrator.py drives the
extract → decode → recognize loop, cues.py regroups tokens into
subtitle cues.

RULES:
- IR dataclasses are the contract between the loop and the formatters
- ffmpeg and sherpa-onnx are reached only through injected collaborators
"""
