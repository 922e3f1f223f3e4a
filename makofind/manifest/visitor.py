"""Per-entry classification policy and manifest emission."""

import logging
from enum import Enum
from typing import TextIO

from makofind.manifest.progress import ManifestStats
from makofind.manifest.record import ManifestRecord
from makofind.walker.models import EntryKind, WalkEntry

logger = logging.getLogger(__name__)


class VisitResult(Enum):
    OK = "ok"
    ABORT = "abort"


class ManifestVisitor:
    """Decides what to do with each walked entry.

    Regular files become manifest lines on ``stream``. Directories and
    symlinks are counted and otherwise ignored. Unreadable directories,
    stat failures and lost records are reported and counted as errors
    without stopping the walk. An entry of unknown kind points at something
    systemic, so it asks the caller to abandon the current root.
    """

    def __init__(self, stream: TextIO, stats: ManifestStats):
        self.stream = stream
        self.stats = stats

    def visit(self, entry: WalkEntry) -> VisitResult:
        kind = entry.kind

        if kind is EntryKind.FILE:
            self._emit(entry)
        elif kind is EntryKind.DIRECTORY:
            self.stats.directories_visited += 1
        elif kind is EntryKind.SYMLINK:
            self.stats.symlinks_skipped += 1
        elif kind is EntryKind.UNREADABLE_DIRECTORY:
            self._fail("Unable to read directory: %s", entry.path)
        elif kind is EntryKind.STAT_FAILED:
            self._fail("stat failed at %s", entry.path)
        else:
            mode = entry.stat.mode if entry.stat is not None else None
            self._fail("%s: unknown type (%s)", entry.path, _format_mode(mode))
            return VisitResult.ABORT

        return VisitResult.OK

    def _emit(self, entry: WalkEntry) -> None:
        assert entry.stat is not None
        record = ManifestRecord.from_snapshot(entry.path, entry.stat)

        try:
            self.stream.write(record.to_line())
        except (OSError, ValueError) as e:
            self._fail("Failed to print information for: %s (%s)", entry.path, e)
            return

        self.stats.files_emitted += 1
        self.stats.logical_bytes += record.size
        self.stats.physical_kb += record.physical_kb

    def _fail(self, message: str, *args: object) -> None:
        logger.error(message, *args)
        self.stats.record_error()


def _format_mode(mode: int | None) -> str:
    if mode is None:
        return "no mode"
    return f"{mode:#o}"
