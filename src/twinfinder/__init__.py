"""
twinfinder — duplicate file finder built around a three-stage comparator.

Core features:
- Size check first, so files of different sizes are never opened
- Whole-file digest (SHA-1 by default), computed at most once per file
- Optional thorough mode: byte-by-byte verification after digest match
- CLI interface in the tradition of duff
"""

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("twinfinder")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API — only what users should import directly
from twinfinder.core import (
    Entry, EntryStatus, DigestAlgorithm, DuplicateGroup, ComparisonConfig, ScanParams,
    DigestError, OpenError, ReadError,
    DigestComputerImpl, ComparatorImpl, EntryScannerImpl, EntryGrouperImpl)

__all__ = [
    "Entry",
    "EntryStatus",
    "DigestAlgorithm",
    "DuplicateGroup",
    "ComparisonConfig",
    "ScanParams",
    "DigestError",
    "OpenError",
    "ReadError",
    "DigestComputerImpl",
    "ComparatorImpl",
    "EntryScannerImpl",
    "EntryGrouperImpl",
    "__version__",
]
