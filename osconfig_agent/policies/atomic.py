"""Crash-safe file replacement.

Content is written to a temporary file in the destination's directory and
renamed over the destination, so readers see either the old file or the
complete new one.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple, Union

from ..common.logger import get_logger
from .base import CancelToken, RepoFileError, RepoFileStage

logger = get_logger("atomic_write")


class LocalFileSystem:
    """Filesystem primitives used by atomic_write_text.

    Subclass to inject faults or observe calls in tests.
    """

    def mkstemp(self, directory: str, prefix: str, suffix: str) -> Tuple[int, str]:
        return tempfile.mkstemp(dir=directory, prefix=prefix, suffix=suffix)

    def chmod(self, path: str, mode: int) -> None:
        os.chmod(path, mode)

    def write(self, fd: int, data: bytes) -> None:
        """Write all of data to fd, fsync and close it."""
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

    def replace(self, src: str, dst: str) -> None:
        os.replace(src, dst)

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def unlink(self, path: str) -> None:
        os.unlink(path)


def _discard(fs: LocalFileSystem, tmp_path: str) -> None:
    try:
        if fs.exists(tmp_path):
            fs.unlink(tmp_path)
    except OSError as e:
        logger.warning(f"Could not remove temporary file {tmp_path}: {e}")


def atomic_write_text(
    path: Union[str, Path],
    content: str,
    fs: Optional[LocalFileSystem] = None,
    cancel: Optional[CancelToken] = None,
    mode: int = 0o644,
    encoding: str = "utf-8",
) -> int:
    """Replace path with content in one atomic step.

    Args:
        path: Destination file
        content: Full file content
        fs: Filesystem implementation (LocalFileSystem by default)
        cancel: Token checked before any I/O and again before the rename
        mode: Permission bits of the new file
        encoding: Text encoding

    Returns:
        Number of bytes written

    Raises:
        RepoFileError: If cancelled or any stage fails. The destination is
            left exactly as it was.
    """
    fs = fs or LocalFileSystem()
    dest = str(path)

    if cancel is not None and cancel.cancelled:
        raise RepoFileError(RepoFileStage.CANCELLED, f"Write to {dest} cancelled", dest)

    try:
        data = content.encode(encoding)
    except UnicodeEncodeError as e:
        raise RepoFileError(
            RepoFileStage.WRITE, f"Cannot encode content for {dest} as {encoding}: {e}", dest
        ) from e

    directory = os.path.dirname(os.path.abspath(dest))
    prefix = f".{os.path.basename(dest)}."

    try:
        fd, tmp_path = fs.mkstemp(directory, prefix, ".tmp")
    except OSError as e:
        raise RepoFileError(
            RepoFileStage.PREPARE, f"Cannot create temporary file in {directory}: {e}", dest
        ) from e

    try:
        try:
            fs.chmod(tmp_path, mode)
        except OSError as e:
            os.close(fd)
            raise RepoFileError(
                RepoFileStage.PREPARE, f"Cannot set mode on {tmp_path}: {e}", dest
            ) from e

        try:
            fs.write(fd, data)
        except OSError as e:
            raise RepoFileError(
                RepoFileStage.WRITE, f"Error writing {tmp_path}: {e}", dest
            ) from e

        if cancel is not None and cancel.cancelled:
            raise RepoFileError(
                RepoFileStage.CANCELLED, f"Write to {dest} cancelled before commit", dest
            )

        try:
            fs.replace(tmp_path, dest)
        except OSError as e:
            raise RepoFileError(
                RepoFileStage.COMMIT, f"Error renaming {tmp_path} to {dest}: {e}", dest
            ) from e
    except BaseException:
        _discard(fs, tmp_path)
        raise

    logger.debug(f"Replaced {dest} ({len(data)} bytes)")
    return len(data)
