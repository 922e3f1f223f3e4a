"""Root iteration: walks each root in turn and collects the overall outcome."""

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TextIO

from makofind.manifest.progress import ManifestStats, ProgressReporter
from makofind.manifest.visitor import ManifestVisitor, VisitResult
from makofind.walker import MAX_DESCRIPTORS, WalkError, walk

logger = logging.getLogger(__name__)


class NoRootsError(ValueError):
    """Raised when a run is requested without any root paths."""


class RootOutcome(Enum):
    """How the walk of a single root ended."""

    COMPLETED = "completed"
    # The visitor met an entry it could not make sense of.
    ABORTED = "aborted"
    # The walk itself could not continue (root stat, depth limit, read error).
    FAILED = "failed"
    # Never attempted because an earlier root aborted under fail-fast.
    SKIPPED = "skipped"


@dataclass
class RootResult:
    root: str
    outcome: RootOutcome


@dataclass
class RunResult:
    """Aggregate outcome of a run, inspected once at the end."""

    roots: list[RootResult] = field(default_factory=list)
    stats: ManifestStats = field(default_factory=ManifestStats)

    @property
    def failed(self) -> bool:
        if self.stats.failed:
            return True
        return any(r.outcome is not RootOutcome.COMPLETED for r in self.roots)


class ManifestRunner:
    """Writes a manifest for a list of roots, one root at a time."""

    def __init__(
        self,
        stream: TextIO,
        max_depth: int = MAX_DESCRIPTORS,
        fail_fast: bool = False,
        progress_interval: int = 100_000,
    ):
        self.stream = stream
        self.max_depth = max_depth
        self.fail_fast = fail_fast
        self.progress = ProgressReporter(interval=progress_interval)

    def run(self, roots: Sequence[str | os.PathLike]) -> RunResult:
        if not roots:
            raise NoRootsError("at least one root path is required")

        result = RunResult()
        visitor = ManifestVisitor(self.stream, result.stats)
        pending = [os.fspath(root) for root in roots]

        while pending:
            root = pending.pop(0)
            outcome = self.walk_root(root, visitor)
            result.roots.append(RootResult(root=root, outcome=outcome))
            self.progress.report_root(root, outcome.value)

            if outcome is RootOutcome.ABORTED and self.fail_fast:
                for skipped in pending:
                    logger.warning("Not traversing %s after earlier abort", skipped)
                    result.roots.append(RootResult(root=skipped, outcome=RootOutcome.SKIPPED))
                break

        self._flush(result.stats)
        self.progress.report_completion(result.stats)
        return result

    def walk_root(self, root: str, visitor: ManifestVisitor) -> RootOutcome:
        """Feed every entry under root to the visitor until done or told to stop.

        The walker is closed on every path out, which releases any directory
        handles it still holds.
        """
        entries = walk(root, self.max_depth)
        try:
            for entry in entries:
                if visitor.visit(entry) is VisitResult.ABORT:
                    logger.error("Abandoning traversal of %s", root)
                    return RootOutcome.ABORTED
                self.progress.report_if_needed(visitor.stats, entry.path)
        except WalkError as e:
            logger.error("An error occurred traversing %s: %s", root, e)
            visitor.stats.record_error()
            return RootOutcome.FAILED
        finally:
            entries.close()

        return RootOutcome.COMPLETED

    def _flush(self, stats: ManifestStats) -> None:
        try:
            self.stream.flush()
        except (OSError, ValueError) as e:
            logger.error("Failed to flush manifest output: %s", e)
            stats.record_error()
