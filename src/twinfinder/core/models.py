"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for duplicate detection: the Entry record with its digest state,
duplicate clusters and the configuration objects shared by CLI and core.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Union

from twinfinder.core.exceptions import DigestError


# =============================
# Enums
# =============================

class EntryStatus(Enum):
    """Where an Entry is in its digest lifecycle."""
    UNTOUCHED = "untouched"
    DIGESTED = "digested"
    INVALID = "invalid"

    def is_terminal(self) -> bool:
        return self is not EntryStatus.UNTOUCHED


class DigestAlgorithm(Enum):
    """
    Digest functions available to the digest computer.
    SHA-1 is the default; xxh64 is a fast non-cryptographic alternative.
    """
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    XXH64 = "xxh64"

    @property
    def display_name(self) -> str:
        """Human-readable name for help text."""
        mapping = {
            DigestAlgorithm.SHA1: "SHA-1",
            DigestAlgorithm.SHA256: "SHA-256",
            DigestAlgorithm.SHA384: "SHA-384",
            DigestAlgorithm.SHA512: "SHA-512",
            DigestAlgorithm.XXH64: "xxHash64",
        }
        return mapping.get(self, self.value)

    @property
    def digest_size(self) -> int:
        """Digest length in bytes."""
        mapping = {
            DigestAlgorithm.SHA1: 20,
            DigestAlgorithm.SHA256: 32,
            DigestAlgorithm.SHA384: 48,
            DigestAlgorithm.SHA512: 64,
            DigestAlgorithm.XXH64: 8,
        }
        return mapping[self]

    def __repr__(self) -> str:
        return self.value


# =============================
# Entry state (tagged variant)
# =============================

@dataclass(frozen=True)
class Untouched:
    status: ClassVar[EntryStatus] = EntryStatus.UNTOUCHED


@dataclass(frozen=True)
class Digested:
    status: ClassVar[EntryStatus] = EntryStatus.DIGESTED
    digest: bytes

    def __post_init__(self):
        if not isinstance(self.digest, bytes):
            raise ValueError("Digest must be bytes")


@dataclass(frozen=True)
class Invalid:
    status: ClassVar[EntryStatus] = EntryStatus.INVALID
    error: DigestError


EntryState = Union[Untouched, Digested, Invalid]

UNTOUCHED = Untouched()


# ======================
#  Core Data Models
# ======================

@dataclass(eq=False)
class Entry:
    """
    One candidate file: its path, its size and the cached digest state.

    path and size are fixed at creation. The digest state starts as
    Untouched and is replaced exactly once, by the digest computer, with
    Digested or Invalid. Status and digest live in a single immutable state
    object, so readers never see one without the other.
    """
    path: str
    size: int  # in bytes
    device: Optional[int] = None
    inode: Optional[int] = None
    state: EntryState = UNTOUCHED
    lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    _FROZEN_FIELDS: ClassVar[tuple] = ("path", "size")

    def __post_init__(self):
        if not isinstance(self.size, int) or self.size < 0:
            raise ValueError(f"Size must be a non-negative integer, got {self.size!r}")

    def __setattr__(self, name, value):
        if name in self._FROZEN_FIELDS and name in self.__dict__:
            raise AttributeError(f"Entry.{name} is immutable")
        super().__setattr__(name, value)

    @classmethod
    def create(cls, path: str, size: int) -> 'Entry':
        """Creates an untouched entry for a (path, size) pair."""
        return cls(path=path, size=size)

    @property
    def status(self) -> EntryStatus:
        return self.state.status

    @property
    def digest(self) -> Optional[bytes]:
        """The cached digest, or None unless the entry is DIGESTED."""
        if isinstance(self.state, Digested):
            return self.state.digest
        return None

    @property
    def error(self) -> Optional[DigestError]:
        """The recorded failure, or None unless the entry is INVALID."""
        if isinstance(self.state, Invalid):
            return self.state.error
        return None

    @property
    def physical_id(self) -> Optional[tuple]:
        """(device, inode) when known; hard links share it."""
        if self.device is None or self.inode is None:
            return None
        return self.device, self.inode

    def clone(self) -> 'Entry':
        """
        Snapshot of this entry, including its current status and digest.
        The copy has its own lock and evolves independently afterwards.
        """
        return Entry(
            path=self.path,
            size=self.size,
            device=self.device,
            inode=self.inode,
            state=self.state,
        )

    def __repr__(self):
        return f"<Entry path={self.path}, size={self.size}, status={self.status.value}>"


def clone_entry(entry: Entry) -> Entry:
    return entry.clone()


def destroy_entry(entries: List[Entry], entry: Entry) -> None:
    """Releases one entry by removing it from the collection that owns it."""
    for index, candidate in enumerate(entries):
        if candidate is entry:
            del entries[index]
            return
    raise ValueError(f"{entry!r} is not owned by this collection")


def destroy_entries(entries: List[Entry]) -> None:
    """Releases every entry; the collection is empty afterwards."""
    entries.clear()


@dataclass
class DuplicateGroup:
    """
    A cluster of entries that compared equal to each other.
    All entries in the group have the same size.
    """
    size: int
    entries: List[Entry]

    @property
    def duplicate_count(self) -> int:
        """How many entries are in this group."""
        return len(self.entries)

    @property
    def digest(self) -> Optional[bytes]:
        """Digest shared by the group (taken from its first entry)."""
        if not self.entries:
            return None
        return self.entries[0].digest

    def is_duplicate(self) -> bool:
        """True if this group contains at least two entries."""
        return self.duplicate_count >= 2

    def get_paths(self) -> List[str]:
        return [e.path for e in self.entries]

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.entries)}>"


# =============================
# Configuration
# =============================

DEFAULT_BUFFER_SIZE = 8192


@dataclass(frozen=True)
class ComparisonConfig:
    """
    Read-only settings threaded into the digest computer and comparator.

    quiet     suppresses I/O warnings
    thorough  adds byte-by-byte verification after the digest check
    """
    quiet: bool = False
    thorough: bool = False
    algorithm: DigestAlgorithm = DigestAlgorithm.SHA1
    buffer_size: int = DEFAULT_BUFFER_SIZE
    content_chunk_size: int = DEFAULT_BUFFER_SIZE

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if isinstance(self.algorithm, str):
            try:
                object.__setattr__(self, "algorithm", DigestAlgorithm(self.algorithm.lower()))
            except ValueError:
                valid = ", ".join(a.value for a in DigestAlgorithm)
                raise ValueError(f"Unknown digest algorithm '{self.algorithm}'. Valid options: {valid}")

        if self.buffer_size <= 0:
            raise ValueError("Buffer size must be positive")

        if self.content_chunk_size <= 0:
            raise ValueError("Content chunk size must be positive")


@dataclass
class ScanParams:
    """How path arguments are turned into entries."""
    recursive: bool = False
    include_hidden: bool = False
    follow_links: bool = False
    exclude_empty: bool = False
    physical: bool = False
    quiet: bool = False
