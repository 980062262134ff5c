"""Discovery engine for TreeFilter.

Builds ``DirectoryWalker`` instances from plain filter criteria and drives
them over one or more source directories.  Results stay lazy end to end: a
source is not opened until the previous one is exhausted.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, Union

from ..filters.predicates import any_of, has_extension, is_hidden, name_matches, name_startswith, negate, path_matches, size_between
from .filesystem import FileSystem
from .walker import DirectoryWalker, WalkResult

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def build_walker(
    root: PathLike,
    extensions: Sequence[str] = (),
    prefixes: Sequence[str] = (),
    patterns: Sequence[str] = (),
    exclude_patterns: Sequence[str] = (),
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
    include_hidden: bool = True,
    filesystem: Optional[FileSystem] = None,
) -> DirectoryWalker:
    """Create a walker over ``root`` with the given criteria.

    Each non-empty criterion becomes one filter; within a criterion the
    values are alternatives (``extensions=['txt', 'md']`` accepts either).
    Name checks are registered before stat-based size checks.
    """
    walker = DirectoryWalker(root, filesystem=filesystem)
    root_path = Path(root)
    if not include_hidden:
        walker.add_filter(lambda path: not is_hidden(path.relative_to(root_path)))
    if extensions:
        walker.add_filter(has_extension(*extensions))
    if prefixes:
        walker.add_filter(any_of(*(name_startswith(p) for p in prefixes)))
    if patterns:
        walker.add_filter(any_of(*(name_matches(p) for p in patterns)))
    if exclude_patterns:
        walker.add_filter(negate(any_of(*(path_matches(p) for p in exclude_patterns))))
    if min_size is not None or max_size is not None:
        walker.add_filter(size_between(min_size, max_size))
    return walker


def walk_results(sources: Iterable[PathLike], extensions: Sequence[str] = (), **criteria) -> Iterator[WalkResult]:
    """Yield every ``WalkResult`` for each source in turn, errors included."""
    for src in sources:
        logger.info('Scanning %s', src)
        with build_walker(src, extensions, **criteria) as walker:
            yield from walker


def discover_files(
    sources: Iterable[PathLike],
    extensions: Sequence[str] = (),
    *,
    fail_fast: bool = False,
    **criteria,
) -> Iterator[Path]:
    """Yield paths of files under ``sources`` matching the criteria.

    Args:
        sources: Directory paths to search, walked one after the other.
        extensions: File suffixes (leading dot optional) to include,
            case-insensitive.  Empty means any extension.
        fail_fast: Raise the first ``WalkError`` instead of logging it.
        **criteria: Further keyword arguments for ``build_walker``.

    Yields:
        ``pathlib.Path`` objects pointing to matching files.
    """
    for result in walk_results(sources, extensions, **criteria):
        if result.ok:
            yield result.path
        elif fail_fast:
            raise result.error
        else:
            logger.warning('Skipping: %s', result.error)
