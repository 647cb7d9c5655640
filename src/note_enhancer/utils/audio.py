"""Audio upload validation and scoped temporary files."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from note_enhancer.errors import InvalidInputError

logger = logging.getLogger(__name__)

ALLOWED_AUDIO_EXTENSIONS = frozenset({".mp3", ".mp4", ".m4a", ".wav", ".webm", ".ogg", ".mpeg"})


def audio_suffix(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_audio(filename: str, size: int, max_upload_mb: int = 25) -> None:
    """Reject non-audio extensions and payloads above the upload limit."""
    suffix = audio_suffix(filename)
    if suffix not in ALLOWED_AUDIO_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_AUDIO_EXTENSIONS))
        raise InvalidInputError(f"Unsupported audio format '{suffix or filename}'. Allowed: {allowed}")
    if size <= 0:
        raise InvalidInputError("Audio file is empty")
    if size > max_upload_mb * 1024 * 1024:
        raise InvalidInputError(f"Audio file exceeds the {max_upload_mb} MB upload limit")


@contextmanager
def temporary_audio_file(data: bytes, suffix: str = ".m4a") -> Iterator[Path]:
    """Write audio bytes to a temp file that is removed when the block exits."""
    fd, name = tempfile.mkstemp(suffix=suffix, prefix="note-enhancer-")
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        else:
            logger.debug("Removed temporary audio file %s", path)
