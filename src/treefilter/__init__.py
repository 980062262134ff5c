"""TreeFilter: lazy, predicate-filtered directory walking."""

from .discovery.errors import DirectoryOpenError, DirectoryReadError, FileReadError, WalkError
from .discovery.walker import DirectoryWalker, WalkResult

__all__ = [
    'DirectoryOpenError',
    'DirectoryReadError',
    'DirectoryWalker',
    'FileReadError',
    'WalkError',
    'WalkResult',
]

__version__ = '0.1.0'
