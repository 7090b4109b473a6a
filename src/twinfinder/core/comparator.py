"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/comparator.py
Three-stage equality test between two entries.

STAGES
------
1. Size     : different sizes are never duplicates; no file is opened
2. Digest   : whole-file digests, computed on demand and cached in the entries
3. Content  : byte-by-byte comparison, only in thorough mode

The general idea is to find proof of inequality as early and as cheaply as
possible. Read failures never escape: an entry that cannot be read is simply
not a duplicate of anything.
"""

import logging
from typing import Optional

from twinfinder.core.exceptions import DigestError
from twinfinder.core.hasher import DigestComputerImpl, open_binary
from twinfinder.core.interfaces import Comparator, DigestComputer, Opener
from twinfinder.core.models import ComparisonConfig, Entry

logger = logging.getLogger(__name__)


class ComparatorImpl(Comparator):
    def __init__(
            self,
            config: Optional[ComparisonConfig] = None,
            digester: Optional[DigestComputer] = None,
            opener: Optional[Opener] = None
    ):
        self.config = config or ComparisonConfig()
        self.opener = opener or open_binary
        self.digester = digester or DigestComputerImpl(self.config, opener=self.opener)

    def are_duplicates(self, first: Entry, second: Entry, thorough: Optional[bool] = None) -> bool:
        """
        True if both entries have the same size, the same digest and, in
        thorough mode, the same bytes. May digest either entry as a side effect.
        """
        if thorough is None:
            thorough = self.config.thorough

        if first.size != second.size:
            return False

        if not self.compare_digests(first, second):
            return False

        if thorough and not self.compare_contents(first, second):
            return False

        return True

    def compare_digests(self, first: Entry, second: Entry) -> bool:
        """Compares digests, generating them if necessary."""
        try:
            first_digest = self.digester.digest_of(first)
            second_digest = self.digester.digest_of(second)
        except DigestError:
            return False
        return first_digest == second_digest

    def compare_contents(self, first: Entry, second: Entry) -> bool:
        """
        Compares the two files from the start and stops at the first chunk
        that differs. Assumes equal sizes, which the size stage guarantees.

        Reads happen in content_chunk_size pieces, so up to one chunk past the
        first differing byte may be read. Only content_chunk_size=1 never reads
        beyond it.
        """
        chunk_size = self.config.content_chunk_size
        try:
            with self.opener(first.path) as first_stream, self.opener(second.path) as second_stream:
                while True:
                    first_chunk = first_stream.read(chunk_size)
                    second_chunk = second_stream.read(chunk_size)
                    if first_chunk != second_chunk:
                        return False
                    if not first_chunk:
                        return True
        except OSError as e:
            logger.debug(f"Content comparison of {first.path} and {second.path} failed: {e}")
            return False
