from __future__ import annotations

from collections import Counter
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Set

import pytest

from treefilter.discovery.filesystem import FileSystem, Listing


@pytest.fixture
def test_structure(tmp_path: Path) -> Path:
    """root/{a.txt, other.log, sub/{b.txt, prefix_c.txt}}"""
    root = tmp_path / 'test_structure'
    sub = root / 'sub'
    sub.mkdir(parents=True)
    (root / 'a.txt').write_text('a')
    (root / 'other.log').write_text('log line\n')
    (sub / 'b.txt').write_text('bb')
    (sub / 'prefix_c.txt').write_text('ccc')
    return root


def rel(paths, root: Path) -> Set[str]:
    return {p.relative_to(root).as_posix() for p in paths}


class MemoryListing(Listing):
    def __init__(self, fs: 'MemoryFileSystem', path: Path, entries: List[Path], fail_at: Optional[int]):
        super().__init__(path)
        self.fs = fs
        self.entries = entries
        self.position = 0
        self.fail_at = fail_at
        self.closed = False

    def __next__(self) -> Path:
        self.fs.calls['next'] += 1
        if self.fail_at is not None and self.position == self.fail_at:
            self.fail_at = None
            raise PermissionError(13, 'Permission denied', str(self.path))
        if self.position >= len(self.entries):
            raise StopIteration
        entry = self.entries[self.position]
        self.position += 1
        return entry

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.fs.open_listings.discard(self)


class MemoryFileSystem(FileSystem):
    """In-memory tree counting every primitive the walker calls.

    ``files`` maps POSIX paths to ``None`` for directories and anything else
    for files.  ``unreadable`` directories fail to open; ``read_errors`` maps
    a directory to the entry index at which reading raises once.
    """

    def __init__(self, files: Dict[str, object], unreadable=(), read_errors=None):
        self.nodes = {PurePosixPath(k): v for k, v in files.items()}
        for path in list(self.nodes):
            for parent in path.parents:
                if str(parent) != '.':
                    self.nodes.setdefault(parent, None)
        self.unreadable = {PurePosixPath(p) for p in unreadable}
        self.read_errors = {PurePosixPath(k): v for k, v in (read_errors or {}).items()}
        self.calls: Counter = Counter()
        self.open_listings: Set[MemoryListing] = set()

    def exists(self, path: Path) -> bool:
        self.calls['exists'] += 1
        return PurePosixPath(path) in self.nodes

    def is_dir(self, path: Path) -> bool:
        self.calls['is_dir'] += 1
        key = PurePosixPath(path)
        return key in self.nodes and self.nodes[key] is None

    def open_listing(self, path: Path) -> Listing:
        self.calls['open_listing'] += 1
        key = PurePosixPath(path)
        if key not in self.nodes:
            raise FileNotFoundError(2, 'No such file or directory', str(path))
        if self.nodes[key] is not None:
            raise NotADirectoryError(20, 'Not a directory', str(path))
        if key in self.unreadable:
            raise PermissionError(13, 'Permission denied', str(path))
        children = sorted(Path(p) for p in self.nodes if p.parent == key)
        listing = MemoryListing(self, Path(path), children, self.read_errors.get(key))
        self.open_listings.add(listing)
        return listing


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem(
        {
            'root/a.txt': 'a',
            'root/other.log': 'log',
            'root/sub/b.txt': 'b',
            'root/sub/prefix_c.txt': 'c',
        }
    )
