"""Directory discovery utilities for walking source trees."""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, Optional, Set


logger = logging.getLogger(__name__)

# Nothing is skipped unless the caller asks for it.
DEFAULT_EXCLUDE_DIRS: FrozenSet[str] = frozenset()


def iter_directories(
    root: Path,
    recurse: bool = True,
    exclude_dirs: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
) -> Iterator[Path]:
    """
    Iterate over a directory and its subdirectories.

    The walk is depth-first and pre-order: a directory is yielded before any
    of its children, and children are visited in sorted name order.

    Args:
        root: Directory to start from. Always yielded.
        recurse: If False, only root is yielded.
        exclude_dirs: Directory names to skip (with their subtrees).
                     Entries starting with "*" match by suffix.
        max_depth: Maximum depth to descend. None means unlimited.

    Yields:
        Path objects for each visited directory.
    """
    excluded = frozenset(exclude_dirs) if exclude_dirs is not None else DEFAULT_EXCLUDE_DIRS
    suffixes = [pat.lstrip("*") for pat in excluded if pat.startswith("*")]

    def _walk(current: Path, depth: int, ancestors: Set[Path]) -> Iterator[Path]:
        yield current

        if not recurse:
            return
        if max_depth is not None and depth >= max_depth:
            return

        try:
            entries = sorted(current.iterdir())
        except OSError as e:
            logger.warning("Skipping unreadable directory %s: %s", current, e)
            return

        for entry in entries:
            try:
                if not entry.is_dir():
                    continue
                real = entry.resolve()
            except OSError as e:
                logger.warning("Skipping inaccessible entry %s: %s", entry, e)
                continue

            if entry.name in excluded or any(entry.name.endswith(s) for s in suffixes):
                logger.debug("Excluded directory %s", entry)
                continue

            if real in ancestors:
                # Symlink back to a directory on the current path.
                logger.debug("Skipping directory cycle at %s -> %s", entry, real)
                continue

            ancestors.add(real)
            yield from _walk(entry, depth + 1, ancestors)
            ancestors.discard(real)

    yield from _walk(root, 0, {root.resolve()})
