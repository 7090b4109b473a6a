"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Partitions entries into clusters of duplicates.
Every equality verdict comes from the comparator; this module only decides
which pairs get compared.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from twinfinder.core.comparator import ComparatorImpl
from twinfinder.core.models import DuplicateGroup, Entry, EntryStatus

logger = logging.getLogger(__name__)


class EntryGrouperImpl:
    """
    Groups entries by size, then splits each size bucket into clusters by
    comparing every entry with the first member of each known cluster.

    Attributes:
        comparator: Decides duplicate-ness of two entries
        physical: Collapse hard links (same device and inode) to one entry
        workers: When set, digests candidate entries in a thread pool first
    """

    def __init__(
            self,
            comparator: Optional[ComparatorImpl] = None,
            physical: bool = False,
            workers: Optional[int] = None
    ):
        self.comparator = comparator or ComparatorImpl()
        self.physical = physical
        self.workers = workers

    def group_by_size(self, entries: List[Entry]) -> Dict[int, List[Entry]]:
        """Groups entries by their size."""
        return self._group_by(entries, lambda e: e.size)

    @staticmethod
    def drop_physical_duplicates(entries: List[Entry]) -> List[Entry]:
        """Keeps the first entry seen for each physical file."""
        seen = set()
        result = []
        for entry in entries:
            key = entry.physical_id
            if key is not None:
                if key in seen:
                    logger.debug(f"Skipping hard link {entry.path}")
                    continue
                seen.add(key)
            result.append(entry)
        return result

    def cluster(
            self,
            entries: List[Entry],
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[DuplicateGroup]:
        """
        Returns duplicate clusters (two or more entries each), ordered by the
        first appearance of their size in the input.
        """
        if self.physical:
            entries = self.drop_physical_duplicates(entries)

        size_groups = self.group_by_size(entries)
        total = sum(len(bucket) for bucket in size_groups.values())

        if self.workers:
            candidates = [e for bucket in size_groups.values() for e in bucket]
            self.comparator.digester.digest_many(candidates, max_workers=self.workers)

        groups = []
        processed = 0
        for size, bucket in size_groups.items():
            for members in self._cluster_bucket(bucket):
                groups.append(DuplicateGroup(size=size, entries=members))
            processed += len(bucket)
            if progress_callback:
                progress_callback("Comparing", processed, total)

        logger.debug(f"Found {len(groups)} clusters among {len(entries)} entries")
        return groups

    def _cluster_bucket(self, bucket: List[Entry]) -> List[List[Entry]]:
        clusters: List[List[Entry]] = []
        for entry in bucket:
            for members in clusters:
                if self.comparator.are_duplicates(members[0], entry):
                    members.append(entry)
                    break
            else:
                if entry.status is not EntryStatus.INVALID:
                    clusters.append([entry])
            # A lone representative that turned out unreadable can never match
            clusters = [
                members for members in clusters
                if len(members) > 1 or members[0].status is not EntryStatus.INVALID
            ]
        return [members for members in clusters if len(members) >= 2]

    @staticmethod
    def _group_by(entries: List[Entry], key_func: Callable[[Entry], Any]) -> Dict[Any, List[Entry]]:
        """
        Helper method to group entries by any computed key.
        Groups with fewer than two entries are dropped.
        """
        groups = defaultdict(list)
        for entry in entries:
            groups[key_func(entry)].append(entry)
        return {key: group for key, group in groups.items() if len(group) >= 2}
