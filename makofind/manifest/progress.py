"""Run statistics and progress reporting for manifest generation."""

import logging
import time
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class ManifestStats:
    """Counters accumulated across every root of a run.

    ``failed`` becomes true with the first recorded error and stays true.
    """

    files_emitted: int = 0
    directories_visited: int = 0
    symlinks_skipped: int = 0
    logical_bytes: int = 0
    physical_kb: int = 0
    errors: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def failed(self) -> bool:
        return self.errors > 0

    @property
    def elapsed_seconds(self) -> float:
        return time.time() - self.start_time

    def record_error(self) -> None:
        self.errors += 1


class ProgressReporter:
    """Reports progress through the logging system.

    Manifest lines own standard output, so nothing here prints directly.
    """

    def __init__(self, interval: int = 100_000):
        self.interval = interval
        self._last_report_count = 0

    def report_if_needed(self, stats: ManifestStats, current_path: str) -> None:
        if self.interval <= 0:
            return
        if stats.files_emitted - self._last_report_count >= self.interval:
            logger.info("[%s files] Walking: %s", f"{stats.files_emitted:,}", current_path)
            self._last_report_count = stats.files_emitted

    def report_root(self, root: str, outcome: str) -> None:
        logger.debug("Finished %s: %s", root, outcome)

    def report_completion(self, stats: ManifestStats) -> None:
        logger.info(
            "Manifest complete: %s files in %s directories (%s), %s logical, %s allocated, %d errors",
            f"{stats.files_emitted:,}",
            f"{stats.directories_visited:,}",
            _format_duration(stats.elapsed_seconds),
            _format_kilobytes(stats.logical_bytes / 1024),
            _format_kilobytes(stats.physical_kb),
            stats.errors,
        )


def _format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


def _format_kilobytes(kilobytes: float) -> str:
    """Render a size given in 1 KiB blocks, the unit of the manifest's last column."""
    value = float(kilobytes)
    for unit in ("KB", "MB", "GB", "TB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} PB"
