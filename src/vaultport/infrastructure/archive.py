"""Zip archive writer for the converted vault.

Entries are written with a fixed timestamp and permission bits so the
same input tree always yields the same archive bytes.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from types import TracebackType
from typing import Self

logger = logging.getLogger(__name__)

_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class ArchiveError(Exception):
    """Raised when the output archive cannot be written."""


class ArchiveWriter:
    """Append-only zip writer with maximum DEFLATE compression by default.

    Usage::

        with ArchiveWriter(Path("out.zip")) as archive:
            archive.append("vault.set.md", text)
        size = archive.size
    """

    def __init__(self, path: Path, *, compression_level: int = 9) -> None:
        self.path = path
        self.compression_level = compression_level
        self._zip: zipfile.ZipFile | None = None
        self.size = 0

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._zip is None:
            return
        if exc_type is None:
            self.finalize()
        else:
            self._zip.close()
            self._zip = None

    def open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._zip = zipfile.ZipFile(
                self.path,
                mode="w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compression_level,
            )
        except OSError as exc:
            msg = f"Cannot open archive {self.path}: {exc}"
            raise ArchiveError(msg) from exc

    def append(self, name: str, data: bytes | str) -> None:
        """Add one entry named *name*."""
        if self._zip is None:
            msg = "Archive is not open"
            raise ArchiveError(msg)
        if isinstance(data, str):
            data = data.encode("utf-8")
        info = zipfile.ZipInfo(name, date_time=_FIXED_DATE_TIME)
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = 0o644 << 16
        try:
            self._zip.writestr(info, data, compresslevel=self.compression_level)
        except (OSError, ValueError, zipfile.BadZipFile) as exc:
            msg = f"Cannot write entry {name!r} to {self.path}: {exc}"
            raise ArchiveError(msg) from exc
        logger.debug("Archive entry written: %s (%d bytes)", name, len(data))

    def finalize(self) -> int:
        """Close the archive and return its size in bytes."""
        if self._zip is None:
            return self.size
        try:
            self._zip.close()
            self.size = self.path.stat().st_size
        except OSError as exc:
            msg = f"Cannot finalize archive {self.path}: {exc}"
            raise ArchiveError(msg) from exc
        finally:
            self._zip = None
        return self.size
