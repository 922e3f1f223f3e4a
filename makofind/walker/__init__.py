"""Walker module for filesystem traversal."""

from .filesystem import MAX_DESCRIPTORS, DirectoryStack, walk
from .models import (
    DepthLimitExceeded,
    EntryKind,
    StatSnapshot,
    WalkEntry,
    WalkError,
    classify_mode,
    same_device,
)

__all__ = [
    "walk",
    "DirectoryStack",
    "MAX_DESCRIPTORS",
    "EntryKind",
    "StatSnapshot",
    "WalkEntry",
    "WalkError",
    "DepthLimitExceeded",
    "classify_mode",
    "same_device",
]
