"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements the digest computer: streams a file through a pluggable hash
algorithm and caches the result in the Entry's state.

Guarantees:
- A digest is computed at most once per entry per run, also under threads
- A failed entry is marked INVALID, warned about once, and never reopened
- Memory use does not depend on file size (fixed-size read buffer)
"""

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import BinaryIO, Iterable, List, Optional

import xxhash

from twinfinder.core.exceptions import DigestError, OpenError, ReadError
from twinfinder.core.interfaces import HashAlgorithm, HashStream, Opener
from twinfinder.core.models import (
    ComparisonConfig, DigestAlgorithm, Digested, Entry, Invalid)

logger = logging.getLogger(__name__)


def open_binary(path: str) -> BinaryIO:
    return open(path, "rb")


# Use the same way to implement and use any other hashing algorithm
class HashlibAlgorithmImpl(HashAlgorithm):
    def __init__(self, name: str):
        self.name = name
        hashlib.new(name)  # fail early on names hashlib does not know

    def new(self) -> HashStream:
        return hashlib.new(self.name)


class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxh64"

    def new(self) -> HashStream:
        return xxhash.xxh64()


def get_algorithm(algorithm: DigestAlgorithm) -> HashAlgorithm:
    """Maps a DigestAlgorithm to its implementation."""
    if algorithm is DigestAlgorithm.XXH64:
        return XXHashAlgorithmImpl()
    return HashlibAlgorithmImpl(algorithm.value)


class DigestComputerImpl:
    """
    Computes and caches whole-file digests in Entry objects.

    Dependencies are injectable: the hash algorithm (default taken from the
    config) and the opener used to read files, which lets tests count or
    break I/O.
    """

    def __init__(
            self,
            config: Optional[ComparisonConfig] = None,
            algorithm: Optional[HashAlgorithm] = None,
            opener: Optional[Opener] = None
    ):
        self.config = config or ComparisonConfig()
        self.algorithm = algorithm or get_algorithm(self.config.algorithm)
        self.opener = opener or open_binary

    def digest_of(self, entry: Entry) -> bytes:
        """
        Returns the digest of the entry, reading the file only on first use.

        Raises:
            OpenError / ReadError: now, or on any later call for the same entry.
        """
        cached = self._cached(entry)
        if cached is not None:
            return cached

        # Serialize first access per entry; re-check once the lock is held
        with entry.lock:
            cached = self._cached(entry)
            if cached is not None:
                return cached

            try:
                digest = self._compute(entry)
            except DigestError as e:
                entry.state = Invalid(e)
                self._warn(e)
                raise

            entry.state = Digested(digest)
            return digest

    def try_digest(self, entry: Entry) -> Optional[bytes]:
        """Like digest_of, but returns None instead of raising."""
        try:
            return self.digest_of(entry)
        except DigestError:
            return None

    def digest_many(self, entries: Iterable[Entry], max_workers: Optional[int] = None) -> List[Entry]:
        """
        Digests a batch of entries in a thread pool.
        Returns the entries that were digested successfully, in input order.
        """
        entries = list(entries)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(self.try_digest, entries))
        digested = [entry for entry, digest in zip(entries, results) if digest is not None]
        logger.debug(f"Digested {len(digested)} of {len(entries)} entries")
        return digested

    @staticmethod
    def _cached(entry: Entry) -> Optional[bytes]:
        state = entry.state
        if isinstance(state, Digested):
            return state.digest
        if isinstance(state, Invalid):
            # Same object on every raise; reset so frames do not pile up on it
            raise state.error.with_traceback(None)
        return None

    def _compute(self, entry: Entry) -> bytes:
        try:
            stream = self.opener(entry.path)
        except OSError as e:
            raise OpenError(entry.path, e) from e

        with stream:
            hasher = self.algorithm.new()
            while True:
                try:
                    chunk = stream.read(self.config.buffer_size)
                except OSError as e:
                    raise ReadError(entry.path, e) from e
                if not chunk:
                    break
                hasher.update(chunk)
        return hasher.digest()

    def _warn(self, error: DigestError) -> None:
        if not self.config.quiet:
            logger.warning("%s: %s", error.path, error.reason)
