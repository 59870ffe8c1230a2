"""Speech recognition engine and model acquisition.

WHY: The recognizer and its model files are the only heavyweight,
native-backed pieces of longscribe. Keeping them in one package lets
the core loop depend on a tiny ``transcribe_file`` contract instead of
on sherpa-onnx itself.

RULES:
- recognizer.py owns the sherpa-onnx handle and its release
- models.py resolves, validates, and downloads the model directory
"""

from longscribe.asr.models import get_model_path
from longscribe.asr.recognizer import Recognizer, RecognizerConfig

__all__ = ["Recognizer", "RecognizerConfig", "get_model_path"]
