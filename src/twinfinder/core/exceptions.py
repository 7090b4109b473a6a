"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Error types raised by the digest computer and absorbed by the comparator.
"""

import os
from typing import Optional


class TwinFinderError(Exception):
    """Base class for all twinfinder errors."""


class DigestError(TwinFinderError):
    """
    A file could not be read for digesting or comparison.

    Carries the offending path and the underlying OS error so that the
    warning text can be rebuilt without touching the file again.
    """

    def __init__(self, path: str, cause: Optional[OSError] = None):
        self.path = path
        self.cause = cause
        super().__init__(str(self))

    @property
    def reason(self) -> str:
        """System error description, e.g. 'No such file or directory'."""
        if self.cause is None:
            return "unknown error"
        if self.cause.strerror:
            return self.cause.strerror
        if self.cause.errno:
            return os.strerror(self.cause.errno)
        return str(self.cause) or type(self.cause).__name__

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class OpenError(DigestError):
    """File could not be opened for reading (permissions, missing file, etc.)."""


class ReadError(DigestError):
    """I/O failure in the middle of a stream."""
