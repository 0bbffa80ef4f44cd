"""Atomic file writes for quote-deployments library."""

import os
import stat
import tempfile
from pathlib import Path


def _default_mode() -> int:
    # umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def read_text_exact(path: Path) -> str:
    """
    Read a UTF-8 file without translating line endings.

    Raises:
        FileNotFoundError: If the file does not exist
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_text_atomic(path: Path, text: str) -> None:
    """
    Replace a file's contents in one step.

    The text is written to a temporary file in the same directory, flushed to
    disk, then renamed over the target. Readers see either the old or the new
    contents, never a partial write. An existing file keeps its permission
    bits; a new file gets the umask default.

    Args:
        path: Destination file
        text: Full new contents, written without newline translation

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        mode = _default_mode()

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
