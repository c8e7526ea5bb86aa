"""Filesystem helpers for the output folder and safe filenames."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path

INVALID_FILENAME_CHARS = re.compile(r"[\\/?%*:|\"<>]")


def sanitize_filename(value: str, default: str = "file") -> str:
    """Replaces characters that are invalid on most filesystems with ``-``."""

    sanitized = INVALID_FILENAME_CHARS.sub("-", value or "").strip()
    return sanitized or default


def ensure_directory(path: str) -> str:
    """Creates a directory (and its parents) if needed."""

    Path(path).mkdir(parents=True, exist_ok=True)
    return path


def transcript_filename(display_name: str) -> str:
    return f"{display_name}.txt"


def subtitle_filename(display_name: str, locale_id: str | None) -> str:
    return f"{display_name} [{locale_id or 'unknown'}].srt"


class OutputStore:
    """Flat blob store keyed by filename inside a single output directory.

    The existence of a lecture's transcript file is what marks it as done, so
    files are written through a temporary sibling and moved into place.
    """

    def __init__(self, root: str) -> None:
        self.root = ensure_directory(root)

    def path_for(self, name: str) -> str:
        return os.path.join(self.root, name)

    def exists(self, name: str) -> bool:
        return os.path.exists(self.path_for(name))

    def write_text(self, name: str, content: str, overwrite: bool = False) -> bool:
        """Writes ``content`` unless the file exists; returns whether it was written."""

        target = self.path_for(name)
        if not overwrite and os.path.exists(target):
            return False
        fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=".tmp_", suffix=".part")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(tmp_path, target)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        return True
