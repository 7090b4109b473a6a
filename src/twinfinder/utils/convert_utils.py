"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""

from typing import Optional


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 1.50KB, 3.20MB).
        """
        if size_bytes < 0:
            return "0B"

        units = ["B", "KB", "MB", "GB", "TB", "PB"]
        for unit in units:
            if size_bytes < 1024:
                return f"{size_bytes:.2f}{unit}"
            size_bytes /= 1024
        return f"{size_bytes:.2f}EB"

    @staticmethod
    def digest_to_hex(digest: bytes) -> str:
        """Lowercase hex form of a digest, as printed in cluster headers."""
        return digest.hex() if digest else ""

    @staticmethod
    def format_header(fmt: str, count: int, index: int, size: int, digest: Optional[bytes]) -> str:
        """
        Expands a cluster header format.
        %n entry count, %i cluster index, %s size in bytes,
        %c / %d digest in hex, %% a literal percent sign.
        Unknown escapes are kept as written.
        """
        values = {
            "n": str(count),
            "i": str(index),
            "s": str(size),
            "c": ConvertUtils.digest_to_hex(digest),
            "d": ConvertUtils.digest_to_hex(digest),
            "%": "%",
        }
        result = []
        i = 0
        while i < len(fmt):
            char = fmt[i]
            if char == "%" and i + 1 < len(fmt) and fmt[i + 1] in values:
                result.append(values[fmt[i + 1]])
                i += 2
                continue
            result.append(char)
            i += 1
        return "".join(result)
