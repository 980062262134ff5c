"""Error types for TreeFilter discovery.

Filesystem failures met during a walk are never raised by the walker.  They
are wrapped in one of these classes and handed to the consumer as an item of
the walk, so the consumer decides whether to stop or keep pulling.
"""

from __future__ import annotations

from pathlib import Path


class WalkError(Exception):
    """A single failed filesystem operation encountered during a walk."""

    action = 'walk'

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f'{self.action} {path}: {cause}')
        self.path = path
        self.cause = cause
        self.__cause__ = cause


class DirectoryOpenError(WalkError):
    """A directory could not be opened for listing; its subtree is skipped."""

    action = 'cannot open directory'


class DirectoryReadError(WalkError):
    """Reading the next entry of an open directory listing failed."""

    action = 'cannot read directory'


class FileReadError(WalkError):
    """A file produced by the walk could not be stat'ed or hashed."""

    action = 'cannot read file'
