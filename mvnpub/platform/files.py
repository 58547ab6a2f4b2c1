"""Filesystem helpers for the ephemeral publish directories."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "make_private_dir", "remove_tree"]


def atomic_write_text(
    path: Path,
    content: str,
    *,
    mode: int = 0o600,
    encoding: str = "utf-8",
) -> None:
    """Write text to path atomically using temp file + replace.

    The file is created with ``mode`` before any byte is written, so key
    material and settings never exist with wider permissions.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        os.chmod(tmp_path, mode)
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def make_private_dir(path: Path) -> Path:
    """Create a fresh directory only the current user can read.

    Raises:
        FileExistsError: If the directory already exists; ephemeral
            directories are never reused.
    """
    path.mkdir(mode=0o700, parents=False, exist_ok=False)
    # mkdir's mode is filtered by the umask
    os.chmod(path, 0o700)
    return path


def remove_tree(path: Path) -> bool:
    """Best-effort recursive removal. Returns True if the path is gone."""
    shutil.rmtree(path, ignore_errors=True)
    return not path.exists()
