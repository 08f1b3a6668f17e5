"""Durable local copy of the last fetched metadata document."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

_logger = logging.getLogger(__name__)


class DocumentArchive:
    """Raw document kept on disk for diagnostics and warm starts.

    Writes go to a temporary file in the same directory which then replaces
    the archive, so a crash mid-write leaves the previous copy intact.
    Methods are blocking; async callers run them via ``asyncio.to_thread``.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> bytes:
        return self._path.read_bytes()

    def write(self, body: bytes) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(body)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        _logger.debug("Archived %d bytes to %s", len(body), self._path)
