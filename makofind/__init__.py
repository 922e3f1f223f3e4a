"""makofind - A memory-bounded file manifest generator for mako storage trees."""

__version__ = "0.1.0"

from makofind.manifest import ManifestRunner, RunResult
from makofind.walker import walk

__all__ = ["ManifestRunner", "RunResult", "walk"]
