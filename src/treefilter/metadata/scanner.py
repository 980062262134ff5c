"""File metadata for TreeFilter results.

Collects size, modification time and an optional checksum for the files a
walk produces.  The checksum algorithm is chosen by name from configuration
or the command line.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import xxhash

CHUNK_SIZE = 1 << 16

CHECKSUM_ALGORITHMS: Dict[str, Callable[[], Any]] = {
    'md5': hashlib.md5,
    'sha1': hashlib.sha1,
    'sha256': hashlib.sha256,
    'xxh128': xxhash.xxh3_128,
}


@dataclass(frozen=True)
class FileMetadata:
    """Size, mtime and optional checksum of one produced file."""

    path: Path
    size_bytes: int
    mtime: float
    checksum: Optional[str] = None

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result, checksum: Optional[str] = None) -> 'FileMetadata':
        return cls(path, st.st_size, st.st_mtime, checksum)


def compute_checksum(path: Path, algo: str) -> str:
    """Hex digest of ``path`` using one of ``CHECKSUM_ALGORITHMS``."""
    try:
        factory = CHECKSUM_ALGORITHMS[algo.lower()]
    except KeyError:
        raise ValueError(f'Unsupported checksum algorithm: {algo}') from None
    h = factory()
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
            h.update(chunk)
    return h.hexdigest()


def get_file_metadata(path: Path, checksum_algo: Optional[str] = None) -> FileMetadata:
    """Stat ``path`` and optionally hash it.

    Raises ``OSError`` if the file vanished or is unreadable; callers walking
    a live tree should be ready for that.
    """
    st = path.stat()
    if checksum_algo is None:
        return FileMetadata.from_stat(path, st)
    return FileMetadata.from_stat(path, st, compute_checksum(path, checksum_algo))
