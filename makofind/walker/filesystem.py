"""Physical, mount-confined, depth-first filesystem traversal."""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass

from makofind.walker.models import (
    DepthLimitExceeded,
    EntryKind,
    StatSnapshot,
    WalkEntry,
    WalkError,
    classify_mode,
    same_device,
)

logger = logging.getLogger(__name__)

# Mako stores objects as /manta/<account uuid>/<object uuid>. Each directory
# level holds one open descriptor, so ten is plenty.
MAX_DESCRIPTORS = 10


@dataclass
class _Frame:
    path: str
    depth: int
    handle: Iterator[os.DirEntry]


class DirectoryStack:
    """Chain of currently open directory handles with a hard capacity."""

    def __init__(self, capacity: int = MAX_DESCRIPTORS):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._frames: list[_Frame] = []

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, path: str, depth: int) -> None:
        if len(self._frames) >= self.capacity:
            raise DepthLimitExceeded(
                f"{path}: directory depth exceeds limit of {self.capacity} open handles"
            )
        self._frames.append(_Frame(path=path, depth=depth, handle=os.scandir(path)))

    def top(self) -> _Frame:
        return self._frames[-1]

    def pop(self) -> None:
        frame = self._frames.pop()
        frame.handle.close()

    def close_all(self) -> None:
        while self._frames:
            self.pop()


def lstat_snapshot(path: str) -> StatSnapshot:
    return StatSnapshot.from_stat_result(os.lstat(path))


def walk(root: str | os.PathLike, max_depth: int = MAX_DESCRIPTORS) -> Iterator[WalkEntry]:
    """Yield every object reachable from root without crossing a symlink or mount.

    A directory is yielded before any of its descendants, and all of its
    descendants are yielded before the walk moves past it. Sibling order is
    whatever the operating system returns. At most ``max_depth`` directory
    handles are open at once; a deeper tree raises DepthLimitExceeded.

    Raises:
        WalkError: If the root cannot be examined or a directory read fails
            part way through. The walk cannot continue past either.
    """
    root_path = os.fspath(root)
    try:
        root_stat = lstat_snapshot(root_path)
    except OSError as e:
        raise WalkError(f"cannot stat {root_path}: {e.strerror or e}") from e

    root_device = root_stat.device
    stack = DirectoryStack(max_depth)

    try:
        yield _enter(stack, root_path, root_stat, depth=0)

        while stack:
            frame = stack.top()
            child = _next_child(frame)
            if child is None:
                stack.pop()
                continue

            entry = _examine(stack, child.path, frame.depth + 1, root_device)
            if entry is not None:
                yield entry
    finally:
        stack.close_all()


def _enter(stack: DirectoryStack, path: str, snapshot: StatSnapshot, depth: int) -> WalkEntry:
    kind = classify_mode(snapshot.mode)
    if kind is not EntryKind.DIRECTORY:
        return WalkEntry(path=path, kind=kind, stat=snapshot, depth=depth)

    try:
        stack.push(path, depth)
    except OSError as e:
        return WalkEntry(
            path=path,
            kind=EntryKind.UNREADABLE_DIRECTORY,
            stat=snapshot,
            depth=depth,
            error=e,
        )

    return WalkEntry(path=path, kind=EntryKind.DIRECTORY, stat=snapshot, depth=depth)


def _examine(
    stack: DirectoryStack,
    path: str,
    depth: int,
    root_device: int,
) -> WalkEntry | None:
    try:
        snapshot = lstat_snapshot(path)
    except OSError as e:
        return WalkEntry(path=path, kind=EntryKind.STAT_FAILED, stat=None, depth=depth, error=e)

    if not same_device(root_device, snapshot.device):
        logger.debug("Skipping mount point on another device: %s", path)
        return None

    return _enter(stack, path, snapshot, depth)


def _next_child(frame: _Frame) -> os.DirEntry | None:
    try:
        return next(frame.handle, None)
    except OSError as e:
        raise WalkError(f"error reading directory {frame.path}: {e.strerror or e}") from e
