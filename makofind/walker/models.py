"""Data models for filesystem traversal."""

import os
import stat
from dataclasses import dataclass
from enum import Enum

NANOSECONDS_PER_SECOND = 1_000_000_000


class EntryKind(Enum):
    """Classification of an object encountered during a walk."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    UNREADABLE_DIRECTORY = "unreadable_directory"
    STAT_FAILED = "stat_failed"
    UNKNOWN = "unknown"


class WalkError(Exception):
    """Raised when a root cannot be traversed any further."""


class DepthLimitExceeded(WalkError):
    """Raised when descending would open more directory handles than allowed."""


@dataclass(frozen=True)
class StatSnapshot:
    """The subset of lstat(2) results the manifest needs."""

    size: int
    mtime_sec: int
    mtime_nsec: int
    blocks: int
    device: int
    mode: int

    @classmethod
    def from_stat_result(cls, st: os.stat_result) -> "StatSnapshot":
        mtime_sec, mtime_nsec = divmod(st.st_mtime_ns, NANOSECONDS_PER_SECOND)
        return cls(
            size=st.st_size,
            mtime_sec=mtime_sec,
            mtime_nsec=mtime_nsec,
            blocks=getattr(st, "st_blocks", 0),
            device=st.st_dev,
            mode=st.st_mode,
        )


@dataclass(frozen=True)
class WalkEntry:
    path: str
    kind: EntryKind
    stat: StatSnapshot | None
    depth: int
    error: OSError | None = None


# Non-directory objects are reported as files, as a physical nftw(3C) walk does.
_FILE_LIKE_CHECKS = (
    stat.S_ISREG,
    stat.S_ISFIFO,
    stat.S_ISSOCK,
    stat.S_ISCHR,
    stat.S_ISBLK,
)


def classify_mode(mode: int) -> EntryKind:
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if any(check(mode) for check in _FILE_LIKE_CHECKS):
        return EntryKind.FILE
    return EntryKind.UNKNOWN


def same_device(root_device: int, entry_device: int) -> bool:
    """Return True if an entry lives on the same filesystem as its root."""
    return root_device == entry_device
