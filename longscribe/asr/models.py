"""Model directory resolution, validation, and download.

WHY: The recognizer needs four files (encoder, decoder, joiner, tokens).
Users should be able to point at their own copy, but a first run on a
fresh machine must just work, so the default model is fetched once and
cached.

HOW: get_model_path() checks LONGSCRIBE_MODEL, then the cache directory,
then downloads the release archive with httpx (streamed to a temporary
file, progress on stderr every 5%) and unpacks the .tar.bz2 into the
cache, dropping the archive's root directory.

RULES:
- A directory is a valid model only if all REQUIRED_MODEL_FILES exist
- An invalid LONGSCRIBE_MODEL is warned about, then ignored
- Archive members that would land outside the target are rejected
- Any download or extraction failure raises ModelDownloadError
"""

from __future__ import annotations

import logging
import sys
import tarfile
import tempfile
from pathlib import Path, PurePosixPath
from typing import Callable, Optional, Union

import httpx

from longscribe.config import (
    DEFAULT_MODEL_NAME,
    MODEL_URL,
    REQUIRED_MODEL_FILES,
    cache_dir,
    model_env_path,
)
from longscribe.errors import ModelDownloadError

logger = logging.getLogger(__name__)

_CHUNK_BYTES = 64 * 1024


def _status(msg: str, end: str = "\n") -> None:
    print(msg, end=end, file=sys.stderr, flush=True)


def is_valid_model(path: Union[str, Path]) -> bool:
    """True when every required model file exists under *path*."""
    path = Path(path)
    return all((path / name).is_file() for name in REQUIRED_MODEL_FILES)


def default_model_dir() -> Path:
    return cache_dir() / "longscribe" / "models" / DEFAULT_MODEL_NAME


def get_model_path(on_status: Optional[Callable[[str], None]] = None) -> Path:
    """Return a directory holding a valid model, downloading if needed.

    Args:
        on_status: Optional callback for human-readable status lines.

    Raises:
        ModelDownloadError: No usable model and the download failed.
    """
    env_path = model_env_path()
    if env_path:
        if is_valid_model(env_path):
            return Path(env_path)
        logger.warning("LONGSCRIBE_MODEL=%s not found or invalid", env_path)

    model_dir = default_model_dir()
    if is_valid_model(model_dir):
        return model_dir

    if on_status:
        on_status("Downloading model to {}...".format(model_dir))
    download_and_extract(MODEL_URL, model_dir)
    if not is_valid_model(model_dir):
        raise ModelDownloadError(
            "downloaded archive does not contain a complete model: {}".format(model_dir)
        )
    if on_status:
        on_status("Model ready")
    return model_dir


def download_and_extract(url: str, target_dir: Path) -> None:
    """Download the .tar.bz2 at *url* and unpack it into *target_dir*."""
    with tempfile.TemporaryDirectory(prefix="longscribe-model-") as tmp_dir:
        archive = Path(tmp_dir) / "model.tar.bz2"
        try:
            _download(url, archive)
        except (httpx.HTTPError, OSError) as e:
            raise ModelDownloadError("failed to download model: {}".format(e)) from e

        try:
            extract_tar_bz2(archive, target_dir)
        except (tarfile.TarError, OSError) as e:
            raise ModelDownloadError("extraction failed: {}".format(e)) from e


def _download(url: str, destination: Path) -> None:
    logger.info("Downloading %s", url)
    with httpx.stream("GET", url, follow_redirects=True, timeout=httpx.Timeout(60.0, connect=30.0)) as resp:
        if resp.status_code != 200:
            raise ModelDownloadError(
                "download failed: {} {}".format(resp.status_code, resp.reason_phrase)
            )

        size = int(resp.headers.get("content-length", "0") or 0)
        written = 0
        last_percent = -1
        with open(destination, "wb") as f:
            for block in resp.iter_bytes(_CHUNK_BYTES):
                f.write(block)
                written += len(block)
                if size > 0:
                    percent = written * 100 // size
                    if percent != last_percent and percent % 5 == 0:
                        _status(
                            "\r  Downloading: {:.1f} / {:.1f} MB ({}%)".format(
                                written / (1024 * 1024), size / (1024 * 1024), percent
                            ),
                            end="",
                        )
                        last_percent = percent
        if size > 0:
            _status("")


def extract_tar_bz2(archive: Path, target_dir: Path) -> None:
    """Unpack *archive* into *target_dir*, stripping the root directory.

    Only regular files and directories are extracted.
    """
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    root = target_dir.resolve()

    with tarfile.open(archive, "r:bz2") as tar:
        for member in tar:
            parts = PurePosixPath(member.name).parts
            if len(parts) < 2:
                # Archive root entry
                continue

            destination = (root / Path(*parts[1:])).resolve()
            if root not in destination.parents and destination != root:
                raise ModelDownloadError("unsafe path in archive: {}".format(member.name))

            if member.isdir():
                destination.mkdir(parents=True, exist_ok=True)
            elif member.isfile():
                destination.parent.mkdir(parents=True, exist_ok=True)
                source = tar.extractfile(member)
                if source is None:
                    continue
                with source, open(destination, "wb") as out:
                    while True:
                        block = source.read(_CHUNK_BYTES)
                        if not block:
                            break
                        out.write(block)
