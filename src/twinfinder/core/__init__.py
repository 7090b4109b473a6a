"""
Core duplicate detection engine: entry records, digest computer, comparator,
plus the scanner and grouper that drive them.

- Entry: one candidate file with its cached digest state
- DigestComputerImpl: streaming, memoized whole-file digests
- ComparatorImpl: size -> digest -> (thorough) content equality test
- EntryScannerImpl: builds entries from path arguments
- EntryGrouperImpl: clusters entries using the comparator

All components are pure Python with no UI dependencies.
"""

from .exceptions import TwinFinderError, DigestError, OpenError, ReadError
from .models import (
    Entry, EntryStatus, EntryState, Untouched, Digested, Invalid,
    DigestAlgorithm, DuplicateGroup, ComparisonConfig, ScanParams,
    clone_entry, destroy_entry, destroy_entries)
from .hasher import DigestComputerImpl, HashlibAlgorithmImpl, XXHashAlgorithmImpl, get_algorithm
from .comparator import ComparatorImpl
from .scanner import EntryScannerImpl
from .grouper import EntryGrouperImpl

__all__ = [
    "TwinFinderError",
    "DigestError",
    "OpenError",
    "ReadError",
    "Entry",
    "EntryStatus",
    "EntryState",
    "Untouched",
    "Digested",
    "Invalid",
    "DigestAlgorithm",
    "DuplicateGroup",
    "ComparisonConfig",
    "ScanParams",
    "clone_entry",
    "destroy_entry",
    "destroy_entries",
    "DigestComputerImpl",
    "HashlibAlgorithmImpl",
    "XXHashAlgorithmImpl",
    "get_algorithm",
    "ComparatorImpl",
    "EntryScannerImpl",
    "EntryGrouperImpl",
]
