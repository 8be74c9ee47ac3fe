"""Scoped scratch files for attachment downloads.

WHY: The transcription API wants a local file, so each /speechtotext
request writes the attachment to disk first. The file must disappear on
every exit path, and two users uploading "voice.mp3" at the same time
must not share a path.

HOW: scratch_file() is a context manager that yields a path under the
configured temp directory, prefixed with a fresh uuid4 hex, and removes
the file when the block exits (normally or by exception).

RULES:
- The path keeps the attachment's base name so its extension survives
- Directory components in the attachment name are discarded
- Removal is best-effort: failures are logged as warnings, never raised
- A file that was never created is not an error
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from pathlib import Path, PurePath
from typing import Iterator

logger = logging.getLogger(__name__)


def scratch_path(temp_dir: Path, filename: str) -> Path:
    """Build a unique scratch path for `filename` under `temp_dir`."""
    base = PurePath(filename.replace("\\", "/")).name or "attachment"
    return Path(temp_dir) / "{}-{}".format(uuid.uuid4().hex, base)


@contextmanager
def scratch_file(temp_dir: Path, filename: str) -> Iterator[Path]:
    """Yield a unique scratch path and delete the file on exit."""
    path = scratch_path(temp_dir, filename)
    try:
        yield path
    finally:
        _remove(path)


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Failed to remove scratch file: %s", path)
