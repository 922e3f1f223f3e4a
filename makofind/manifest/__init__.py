"""Manifest module: per-entry policy, record formatting and root iteration."""

from .progress import ManifestStats, ProgressReporter
from .record import ManifestRecord, format_mtime, physical_size_kb
from .runner import ManifestRunner, NoRootsError, RootOutcome, RootResult, RunResult
from .visitor import ManifestVisitor, VisitResult

__all__ = [
    "ManifestRunner",
    "ManifestVisitor",
    "ManifestRecord",
    "ManifestStats",
    "ProgressReporter",
    "RunResult",
    "RootResult",
    "RootOutcome",
    "NoRootsError",
    "VisitResult",
    "format_mtime",
    "physical_size_kb",
]
