"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Turns path arguments into Entry objects.
Features:
- Regular files become entries directly
- Directories are walked when recursive mode is on, ignored otherwise
- Hidden files and directories are skipped unless requested
- Symbolic links are skipped unless followed; directory loops are cut
- Unreadable paths are reported and skipped, never fatal
"""

import os
import stat
import logging
from typing import Iterable, List, Optional, Set, Tuple

from twinfinder.core.interfaces import EntryScanner
from twinfinder.core.models import Entry, ScanParams

logger = logging.getLogger(__name__)


class EntryScannerImpl(EntryScanner):
    """
    Builds entries from files and (optionally) directory trees.
    Uses `os.walk` for traversal and `os.stat` / `os.lstat` for metadata.
    """

    def __init__(self, params: Optional[ScanParams] = None):
        self.params = params or ScanParams()

    def scan(self, paths: Iterable[str]) -> List[Entry]:
        """Returns one entry per accepted file, in discovery order."""
        entries: List[Entry] = []
        visited_dirs: Set[Tuple[int, int]] = set()

        for path in paths:
            info = self._stat(path)
            if info is None:
                continue

            if stat.S_ISDIR(info.st_mode):
                if self.params.recursive:
                    self._walk(path, entries, visited_dirs)
                else:
                    self._warn(path, "Is a directory (use --recursive)")
                continue

            entry = self._make_entry(path, info)
            if entry is not None:
                entries.append(entry)

        logger.debug(f"Scan completed. Found {len(entries)} files.")
        return entries

    def _walk(self, root: str, entries: List[Entry], visited_dirs: Set[Tuple[int, int]]) -> None:
        def on_error(error: OSError) -> None:
            self._warn(error.filename or root, error.strerror or str(error))

        for current, dirs, files in os.walk(root, onerror=on_error, followlinks=self.params.follow_links):
            info = self._stat(current)
            if info is None:
                dirs[:] = []
                continue
            key = (info.st_dev, info.st_ino)
            if key in visited_dirs:
                logger.debug(f"Directory loop detected at {current}")
                dirs[:] = []
                continue
            visited_dirs.add(key)

            # Pre-filter subdirectories BEFORE os.walk enters them
            dirs[:] = sorted(d for d in dirs if self._accept_name(d))

            for filename in sorted(files):
                if not self._accept_name(filename):
                    continue
                path = os.path.join(current, filename)
                file_info = self._stat(path)
                if file_info is None:
                    continue
                entry = self._make_entry(path, file_info)
                if entry is not None:
                    entries.append(entry)

    def _accept_name(self, name: str) -> bool:
        return self.params.include_hidden or not name.startswith(".")

    def _stat(self, path: str) -> Optional[os.stat_result]:
        try:
            info = os.lstat(path)
            if stat.S_ISLNK(info.st_mode):
                if not self.params.follow_links:
                    logger.debug(f"Skipping symbolic link {path}")
                    return None
                info = os.stat(path)
            return info
        except ValueError as e:
            # Embedded NUL in the name
            self._warn(path, str(e))
            return None
        except OSError as e:
            self._warn(path, e.strerror or str(e))
            return None

    def _make_entry(self, path: str, info: os.stat_result) -> Optional[Entry]:
        if not stat.S_ISREG(info.st_mode):
            logger.debug(f"Skipping non-regular file {path}")
            return None
        if self.params.exclude_empty and info.st_size == 0:
            return None
        return Entry(path=path, size=info.st_size, device=info.st_dev, inode=info.st_ino)

    def _warn(self, path: str, reason: str) -> None:
        if not self.params.quiet:
            logger.warning("%s: %s", path, reason)
