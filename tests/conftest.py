"""
Shared fixtures for duplicate detection tests.
Creates isolated temporary files and an opener that records every read.
"""
import threading
from collections import defaultdict
from pathlib import Path
from typing import Callable, Dict

import pytest


class CountingStream:
    """File wrapper that reports every read back to its opener."""

    def __init__(self, raw, opener: "CountingOpener", path: str):
        self.raw = raw
        self.opener = opener
        self.path = path
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        data = self.raw.read(size)
        self.opener.record_read(self.path, len(data))
        return data

    def close(self) -> None:
        self.raw.close()
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False


class CountingOpener:
    """
    Drop-in replacement for open(path, "rb") that counts opens and bytes read
    per path. Thread-safe so it can be used in concurrency tests.
    """

    def __init__(self, read_delay: float = 0.0):
        self.opened = []
        self.bytes_read: Dict[str, int] = defaultdict(int)
        self.streams = []
        self.read_delay = read_delay
        self._lock = threading.Lock()

    def __call__(self, path: str) -> CountingStream:
        raw = open(path, "rb")
        stream = CountingStream(raw, self, path)
        with self._lock:
            self.opened.append(path)
            self.streams.append(stream)
        return stream

    def record_read(self, path: str, count: int) -> None:
        if self.read_delay:
            threading.Event().wait(self.read_delay)
        with self._lock:
            self.bytes_read[path] += count

    def open_count(self, path: str) -> int:
        return self.opened.count(path)

    def all_closed(self) -> bool:
        return all(s.closed for s in self.streams)


@pytest.fixture
def counting_opener():
    return CountingOpener()


@pytest.fixture
def make_file(tmp_path) -> Callable[[str, bytes], Path]:
    """Factory writing `content` to tmp_path/name (parents created)."""
    def _make(name: str, content: bytes) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return _make


@pytest.fixture
def test_files(make_file) -> Dict[str, Path]:
    """
    Controlled files for duplicate scenarios:
    - 2 identical 12-byte files ("hello world!")
    - 1 same-size file with different content
    - 1 file of a different size
    - 2 empty files
    """
    return {
        "hello_a": make_file("hello_a.txt", b"hello world!"),
        "hello_b": make_file("hello_b.txt", b"hello world!"),
        "other_12": make_file("other_12.txt", b"HELLO WORLD?"),
        "longer": make_file("longer.txt", b"hello world!!"),
        "empty_a": make_file("empty_a.txt", b""),
        "empty_b": make_file("empty_b.txt", b""),
    }
