"""Manifest record construction and line formatting."""

from dataclasses import dataclass

from makofind.walker.models import StatSnapshot


@dataclass(frozen=True)
class ManifestRecord:
    """One manifest line's worth of data for a regular file."""

    path: str
    size: int
    mtime_sec: int
    mtime_nsec: int
    physical_kb: int

    @classmethod
    def from_snapshot(cls, path: str, snapshot: StatSnapshot) -> "ManifestRecord":
        return cls(
            path=path,
            size=snapshot.size,
            mtime_sec=snapshot.mtime_sec,
            mtime_nsec=snapshot.mtime_nsec,
            physical_kb=physical_size_kb(snapshot.blocks),
        )

    def to_line(self) -> str:
        timestamp = format_mtime(self.mtime_sec, self.mtime_nsec)
        return f"{self.path}\t{self.size}\t{timestamp}\t{self.physical_kb}\n"


def physical_size_kb(blocks: int) -> int:
    """Convert a count of 512-byte blocks to kilobytes, rounding up."""
    return blocks // 2 + blocks % 2


def format_mtime(seconds: int, nanoseconds: int) -> str:
    # The trailing zero matches GNU find's rendering of fractional timestamps.
    return f"{seconds}.{nanoseconds:09d}0"
