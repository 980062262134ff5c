"""Filesystem backends for the directory walker.

The walker touches the filesystem through three primitives only: an
existence check, a directory check and a directory listing.  They are
gathered behind ``FileSystem`` so tests can substitute an in-memory tree.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator


class Listing(ABC):
    """An open handle over the immediate entries of one directory."""

    def __init__(self, path: Path):
        self.path = path

    def __iter__(self) -> Iterator[Path]:
        return self

    @abstractmethod
    def __next__(self) -> Path:
        """Return the next entry path, raise ``StopIteration`` when drained.

        May raise ``OSError`` if the entry cannot be read.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying handle.  Must be safe to call twice."""


class FileSystem(ABC):
    @abstractmethod
    def exists(self, path: Path) -> bool:
        ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        ...

    @abstractmethod
    def open_listing(self, path: Path) -> Listing:
        """Open ``path`` for listing.  Raises ``OSError`` on failure."""


class ScandirListing(Listing):
    """``os.scandir`` iterator yielding ``pathlib.Path`` entries."""

    def __init__(self, path: Path):
        super().__init__(path)
        self._it = os.scandir(path)

    def __next__(self) -> Path:
        entry = next(self._it)
        return Path(entry.path)

    def close(self) -> None:
        self._it.close()


class LocalFileSystem(FileSystem):
    """The host filesystem.  Symlinks are followed by ``is_dir``."""

    def exists(self, path: Path) -> bool:
        try:
            return path.exists()
        except OSError:
            return False

    def is_dir(self, path: Path) -> bool:
        try:
            return path.is_dir()
        except OSError:
            return False

    def open_listing(self, path: Path) -> Listing:
        return ScandirListing(path)
