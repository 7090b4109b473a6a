"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate detection core.
Structural typing keeps the comparator independent of the concrete hashing and
file access code, so tests can inject counting or failing implementations.

Key Components:
---------------
- HashStream: Incremental hash object (update / digest), as returned by hashlib and xxhash.
- HashAlgorithm: Factory for HashStream objects.
- Opener: Callable opening a path for binary reading.
- DigestComputer: Computes and memoizes the digest of an Entry.
- Comparator: Decides whether two entries are duplicates.
- EntryScanner: Turns path arguments into entries.
"""

from typing import BinaryIO, Iterable, List, Optional, Protocol

from twinfinder.core.models import Entry


class HashStream(Protocol):
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for streaming hash algorithms.

    Allows plugging in SHA-1, SHA-256 or xxHash without affecting the rest of
    the comparison logic.
    """
    name: str

    def new(self) -> HashStream:
        """Returns a fresh incremental hash object."""
        ...


class Opener(Protocol):
    def __call__(self, path: str) -> BinaryIO: ...


class DigestComputer(Protocol):
    """Interface for computing an entry's digest at most once per run."""

    def digest_of(self, entry: Entry) -> bytes:
        """
        Returns the entry's digest, computing it on first use.

        Raises:
            DigestError: The file could not be read now or on an earlier call.
        """
        ...


class Comparator(Protocol):
    """Interface for the size / digest / content equality test."""

    def are_duplicates(self, first: Entry, second: Entry, thorough: Optional[bool] = None) -> bool:
        ...


class EntryScanner(Protocol):
    """Interface for building entries from command line paths."""

    def scan(self, paths: Iterable[str]) -> List[Entry]:
        ...
