"""Lazy, predicate-filtered directory walker for TreeFilter.

``DirectoryWalker`` enumerates the files under a root one at a time.  It keeps
its whole position as plain data: a one-shot start path and a stack of open
directory listings.  Each ``next()`` call does only the filesystem work needed
to find the next matching file, so a walk can be paused, resumed or abandoned
at any point.

Subdirectories are pushed onto one shared LIFO stack rather than recursed into,
so memory is bounded by depth and the order between a new subdirectory and
directories already on the stack is stack order, not strict pre-order.

Example::

    walker = (
        DirectoryWalker('data')
        .add_filter(has_extension('txt'))
        .add_filter(name_startswith('prefix_'))
    )
    for result in walker:
        if result.ok:
            print(result.path)
        else:
            print('skipped:', result.error)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..filters.predicates import Predicate
from .errors import DirectoryOpenError, DirectoryReadError, WalkError
from .filesystem import FileSystem, Listing, LocalFileSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkResult:
    """One item of a walk: either a matching file path or an error."""

    path: Optional[Path] = None
    error: Optional[WalkError] = None

    def __post_init__(self) -> None:
        if (self.path is None) == (self.error is None):
            raise ValueError('WalkResult needs exactly one of path or error')

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Path:
        """Return the path, or raise the error this result carries."""
        if self.error is not None:
            raise self.error
        return self.path


class DirectoryWalker:
    """Recursive iterator over the files of a directory tree.

    Construction performs no I/O and cannot fail.  Filters are registered with
    ``add_filter`` before iteration starts; a file is produced only if every
    filter accepts it.  Filesystem failures are produced as error results and
    the walk carries on with the remaining directories.
    """

    def __init__(self, root: Union[str, os.PathLike], filesystem: Optional[FileSystem] = None):
        self.predicates: List[Predicate] = []
        # Only set until the first call to ``__next__``.
        self.start: Optional[Path] = Path(root)
        self.stack: List[Listing] = []
        self.filesystem = filesystem if filesystem is not None else LocalFileSystem()

    def add_filter(self, predicate: Predicate) -> 'DirectoryWalker':
        """Add a filter predicate and return ``self`` to allow chaining.

        Filters run in registration order and stop at the first rejection, so
        cheap checks should be added first.
        """
        self.predicates.append(predicate)
        return self

    def filters(self, *predicates: Predicate) -> 'DirectoryWalker':
        for predicate in predicates:
            self.add_filter(predicate)
        return self

    @property
    def depth(self) -> int:
        """Number of directory listings currently open."""
        return len(self.stack)

    def _matches(self, path: Path) -> bool:
        return all(predicate(path) for predicate in self.predicates)

    def _push(self, path: Path) -> Optional[WalkResult]:
        try:
            listing = self.filesystem.open_listing(path)
        except OSError as exc:
            logger.debug('Cannot open %s: %s', path, exc)
            return WalkResult(error=DirectoryOpenError(path, exc))
        self.stack.append(listing)
        logger.debug('Entered %s (depth %d)', path, len(self.stack))
        return None

    def _pop(self) -> None:
        listing = self.stack.pop()
        listing.close()

    def _process_entry(self, path: Path) -> Optional[WalkResult]:
        if self.filesystem.is_dir(path):
            return self._push(path)
        if self._matches(path):
            return WalkResult(path=path)
        return None

    def _process_start(self, path: Path) -> Optional[WalkResult]:
        # A missing root is reported as an unopenable directory rather than
        # being tested against the filters as if it were a file.
        if not self.filesystem.exists(path):
            return self._push(path)
        return self._process_entry(path)

    def __iter__(self) -> Iterator[WalkResult]:
        return self

    def __next__(self) -> WalkResult:
        if self.start is not None:
            start, self.start = self.start, None
            result = self._process_start(start)
            if result is not None:
                return result

        while self.stack:
            listing = self.stack[-1]
            try:
                path = next(listing)
            except StopIteration:
                self._pop()
                continue
            except OSError as exc:
                # The listing is abandoned after a read error; later calls
                # continue with the directories below it on the stack.
                logger.debug('Read error in listing, dropping it: %s', exc)
                self._pop()
                return WalkResult(error=DirectoryReadError(listing.path, exc))
            result = self._process_entry(path)
            if result is not None:
                return result

        raise StopIteration

    def paths(self) -> Iterator[Path]:
        """Yield matching paths, raising the first ``WalkError`` met."""
        for result in self:
            yield result.unwrap()

    def close(self) -> None:
        """Release every open listing and end the walk."""
        self.start = None
        while self.stack:
            self._pop()

    def __enter__(self) -> 'DirectoryWalker':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        # ``__init__`` may not have run to completion.
        if getattr(self, 'stack', None):
            self.close()
