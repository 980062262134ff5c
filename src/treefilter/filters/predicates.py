"""Ready-made filter predicates for ``DirectoryWalker``.

Every factory returns a callable taking a ``pathlib.Path`` and returning a
``bool``.  Name-based predicates never touch the filesystem.  Stat-based ones
treat an unreadable file as a rejection so they never raise during a walk.
"""

from __future__ import annotations

from fnmatch import fnmatch, fnmatchcase
from pathlib import Path
from typing import Callable, Optional

Predicate = Callable[[Path], bool]


def has_extension(*extensions: str, case_sensitive: bool = False) -> Predicate:
    """Accept files whose final suffix is one of ``extensions``.

    Extensions may be given with or without the leading dot.  Matching is
    case-insensitive unless ``case_sensitive`` is set.
    """
    if not extensions:
        raise ValueError('has_extension() needs at least one extension')
    if case_sensitive:
        wanted = {ext.lstrip('.') for ext in extensions}
    else:
        wanted = {ext.lstrip('.').lower() for ext in extensions}

    def predicate(path: Path) -> bool:
        suffix = path.suffix[1:]
        if not case_sensitive:
            suffix = suffix.lower()
        return bool(suffix) and suffix in wanted

    return predicate


def name_startswith(prefix: str) -> Predicate:
    return lambda path: path.name.startswith(prefix)


def name_endswith(suffix: str) -> Predicate:
    return lambda path: path.name.endswith(suffix)


def name_matches(pattern: str) -> Predicate:
    """Accept files whose name matches the shell-style ``pattern``."""
    return lambda path: fnmatch(path.name, pattern)


def path_matches(pattern: str) -> Predicate:
    """Accept files whose full POSIX-style path matches ``pattern``.

    ``*`` also matches ``/`` here, so ``*/build/*`` selects everything under any
    ``build`` directory.
    """
    return lambda path: fnmatchcase(path.as_posix(), pattern)


def is_hidden(path: Path) -> bool:
    """True if any component of ``path`` is a dot-file or dot-directory."""
    return any(part.startswith('.') and part not in ('.', '..') for part in path.parts)


def _stat_predicate(test: Callable[[float, float], bool], attribute: str, limit: float) -> Predicate:
    def predicate(path: Path) -> bool:
        try:
            value = getattr(path.stat(), attribute)
        except OSError:
            return False
        return test(value, limit)

    return predicate


def min_size(size_bytes: int) -> Predicate:
    return _stat_predicate(lambda value, limit: value >= limit, 'st_size', size_bytes)


def max_size(size_bytes: int) -> Predicate:
    return _stat_predicate(lambda value, limit: value <= limit, 'st_size', size_bytes)


def modified_after(timestamp: float) -> Predicate:
    return _stat_predicate(lambda value, limit: value > limit, 'st_mtime', timestamp)


def modified_before(timestamp: float) -> Predicate:
    return _stat_predicate(lambda value, limit: value < limit, 'st_mtime', timestamp)


def all_of(*predicates: Predicate) -> Predicate:
    return lambda path: all(p(path) for p in predicates)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda path: any(p(path) for p in predicates)


def negate(predicate: Predicate) -> Predicate:
    return lambda path: not predicate(path)


def size_between(low: Optional[int], high: Optional[int]) -> Predicate:
    """Combine ``min_size``/``max_size``; either bound may be ``None``."""
    checks = []
    if low is not None:
        checks.append(min_size(low))
    if high is not None:
        checks.append(max_size(high))
    return all_of(*checks)
