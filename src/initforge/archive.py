"""Deterministic archive packaging of a generated project.

Identical entries always produce byte-identical archives: entries are sorted
by normalised path, timestamps and ownership are fixed, and permission bits
are reduced to ``0o755`` (executable) or ``0o644``.
"""

from __future__ import annotations

import gzip
import io
import logging
import tarfile
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from .errors import DuplicateEntryError, UnsupportedFormatError
from .project.context import ArchiveEntry
from .utils import normalize_path, parent_directories

logger = logging.getLogger(__name__)

_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
_DIRECTORY_MODE = 0o755


@dataclass(frozen=True)
class ArchiveFormat:
    """A supported archive format."""

    id: str
    extension: str
    content_type: str


ZIP = ArchiveFormat(id="zip", extension="zip", content_type="application/zip")
TGZ = ArchiveFormat(id="tgz", extension="tar.gz", content_type="application/x-compress")

_FORMATS: dict[str, ArchiveFormat] = {
    "zip": ZIP,
    "tgz": TGZ,
    "tar.gz": TGZ,
    "tar+gzip": TGZ,
}


def resolve_format(fmt: str | ArchiveFormat) -> ArchiveFormat:
    """Return the ``ArchiveFormat`` for an identifier.

    Raises:
        UnsupportedFormatError: If *fmt* is not recognised.
    """
    if isinstance(fmt, ArchiveFormat):
        return fmt
    found = _FORMATS.get(str(fmt).strip().lower())
    if found is None:
        raise UnsupportedFormatError(str(fmt), sorted(_FORMATS))
    return found


class Packager:
    """Serialises project entries into ZIP or TAR+GZIP bytes."""

    def package(
        self,
        entries: Iterable[ArchiveEntry],
        fmt: str | ArchiveFormat,
        root: Optional[str] = None,
    ) -> bytes:
        """Build an archive from *entries*.

        Args:
            entries: Files to archive.  Paths are normalised before the
                duplicate check and sorting.
            fmt: Format identifier (``zip``, ``tgz``, ``tar.gz``, ``tar+gzip``).
            root: Optional directory prefix applied to every entry.

        Raises:
            UnsupportedFormatError: For an unknown *fmt*.
            DuplicateEntryError: If two entries share a normalised path, or
                a file path is also the parent directory of another entry.
        """
        archive_format = resolve_format(fmt)
        prepared = self._prepare(entries, root)
        if archive_format is ZIP:
            data = self._zip(prepared)
        else:
            data = self._tgz(prepared)
        logger.debug(
            "Packaged %d entries as %s (%d bytes)", len(prepared), archive_format.id, len(data)
        )
        return data

    # -- Preparation -------------------------------------------------------

    @staticmethod
    def _prepare(entries: Iterable[ArchiveEntry], root: Optional[str]) -> list[ArchiveEntry]:
        prefix = normalize_path(root) + "/" if root else ""
        seen: dict[str, ArchiveEntry] = {}
        for entry in entries:
            path = prefix + normalize_path(entry.path)
            if path in seen:
                raise DuplicateEntryError(path)
            seen[path] = ArchiveEntry(path=path, content=entry.content, executable=entry.executable)
        prepared = [seen[path] for path in sorted(seen)]
        for directory in Packager._directories(prepared):
            if directory in seen:
                raise DuplicateEntryError(directory)
        return prepared

    @staticmethod
    def _directories(entries: list[ArchiveEntry]) -> list[str]:
        directories: set[str] = set()
        for entry in entries:
            directories.update(parent_directories(entry.path))
        return sorted(directories)

    # -- Writers -----------------------------------------------------------

    def _zip(self, entries: list[ArchiveEntry]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for directory in self._directories(entries):
                info = zipfile.ZipInfo(directory + "/", date_time=_ZIP_EPOCH)
                info.create_system = 3
                info.external_attr = ((0o40000 | _DIRECTORY_MODE) << 16) | 0x10
                archive.writestr(info, b"")
            for entry in entries:
                info = zipfile.ZipInfo(entry.path, date_time=_ZIP_EPOCH)
                info.create_system = 3
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = (0o100000 | entry.mode) << 16
                archive.writestr(info, entry.content)
        return buffer.getvalue()

    def _tgz(self, entries: list[ArchiveEntry]) -> bytes:
        raw = io.BytesIO()
        with tarfile.open(fileobj=raw, mode="w", format=tarfile.PAX_FORMAT) as archive:
            for directory in self._directories(entries):
                info = self._tar_info(directory, _DIRECTORY_MODE)
                info.type = tarfile.DIRTYPE
                archive.addfile(info)
            for entry in entries:
                info = self._tar_info(entry.path, entry.mode)
                info.size = len(entry.content)
                archive.addfile(info, io.BytesIO(entry.content))

        compressed = io.BytesIO()
        with gzip.GzipFile(filename="", mode="wb", fileobj=compressed, mtime=0) as gz:
            gz.write(raw.getvalue())
        return compressed.getvalue()

    @staticmethod
    def _tar_info(name: str, mode: int) -> tarfile.TarInfo:
        info = tarfile.TarInfo(name)
        info.mode = mode
        info.mtime = 0
        info.uid = info.gid = 0
        info.uname = info.gname = ""
        return info
