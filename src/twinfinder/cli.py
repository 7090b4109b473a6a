#!/usr/bin/env python3
"""
twinfinder CLI — command line interface for duplicate file detection.
Reports clusters of identical files; it never modifies or deletes anything.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import Iterable, List, NoReturn, Optional, TextIO
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from twinfinder import __version__
from twinfinder.core.comparator import ComparatorImpl
from twinfinder.core.grouper import EntryGrouperImpl
from twinfinder.core.models import ComparisonConfig, DigestAlgorithm, DuplicateGroup, ScanParams
from twinfinder.core.scanner import EntryScannerImpl
from twinfinder.utils.convert_utils import ConvertUtils

DEFAULT_HEADER_FORMAT = "%n files in cluster %i (%s bytes, digest %d)"

EPILOG_TEXT = (
    "Header format escapes:\n"
    "  %%n  number of files in the cluster\n"
    "  %%i  cluster index, starting at 1\n"
    "  %%s  file size in bytes\n"
    "  %%c  digest in hex (same as %%d)\n"
    "  %%%%  a literal percent sign\n"
    "\n"
    "Examples:\n"
    "  %(prog)s -r ~/Pictures\n"
    "  %(prog)s -rt -d sha256 ~/Music ~/Backup/Music\n"
    "  find . -name '*.iso' | %(prog)s -e\n"
)

DIGEST_CHOICES = [a.value for a in DigestAlgorithm]
DIGEST_HELP = "\n".join(f"  {a.value:<8}{a.display_name}" for a in DigestAlgorithm)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self, stdout: Optional[TextIO] = None, stdin: Optional[TextIO] = None):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.stdout = stdout or sys.stdout
        self.stdin = stdin or sys.stdin
        # Undecodable file names travel as surrogate escapes, as os.walk yields them
        for stream in (self.stdout, self.stdin):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(errors="surrogateescape")

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="twinfinder",
            description="twinfinder — report clusters of duplicate files",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "paths",
            nargs="*",
            metavar="PATH",
            help="Files or directories to examine. Read from stdin when omitted,\n"
             "one per line or NUL-separated with --null"
        )

        # Discovery options
        parser.add_argument(
            "--all", "-a",
            action="store_true",
            dest="include_hidden",
            help="Include hidden files and directories when searching recursively"
        )
        parser.add_argument(
            "--recursive", "-r",
            action="store_true",
            help="Descend into directories"
        )
        parser.add_argument(
            "--follow-links", "-L",
            action="store_true",
            dest="follow_links",
            help="Follow symbolic links to files and directories"
        )
        parser.add_argument(
            "--no-empty", "-z",
            action="store_true",
            dest="exclude_empty",
            help="Do not consider empty files"
        )
        parser.add_argument(
            "--physical", "-p",
            action="store_true",
            help="Treat hard links to the same file as a single file"
        )

        # Comparison options
        parser.add_argument(
            "--digest", "-d",
            choices=DIGEST_CHOICES,
            default=DigestAlgorithm.SHA1.value,
            type=str,
            help=f"Digest function. Default: sha1\n{DIGEST_HELP}"
        )
        parser.add_argument(
            "--thorough", "-t",
            action="store_true",
            help="Verify digest matches with a byte-by-byte comparison"
        )

        # Output options
        parser.add_argument(
            "--excess", "-e",
            action="store_true",
            help="Print all but one file of each cluster, without headers"
        )
        parser.add_argument(
            "--format", "-f",
            default=DEFAULT_HEADER_FORMAT,
            type=str,
            dest="header_format",
            help=f"Cluster header format. Default: '{DEFAULT_HEADER_FORMAT}'".replace("%", "%%")
        )
        parser.add_argument(
            "--null", "-0",
            action="store_true",
            help="Read and write NUL-terminated file names; clusters end with an empty record"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress warnings"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show debug logging and a summary"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

    @staticmethod
    def create_params(args: argparse.Namespace) -> tuple:
        """Create ComparisonConfig and ScanParams from CLI arguments."""
        config = ComparisonConfig(
            quiet=args.quiet,
            thorough=args.thorough,
            algorithm=DigestAlgorithm(args.digest),
        )
        scan_params = ScanParams(
            recursive=args.recursive,
            include_hidden=args.include_hidden,
            follow_links=args.follow_links,
            exclude_empty=args.exclude_empty,
            physical=args.physical,
            quiet=args.quiet,
        )
        return config, scan_params

    def read_paths(self, args: argparse.Namespace) -> Iterable[str]:
        """Paths from the command line, or from stdin when none were given."""
        if args.paths:
            return args.paths
        if args.null:
            return [name for name in self.stdin.read().split("\0") if name]
        return [line.rstrip("\r\n") for line in self.stdin if line.rstrip("\r\n")]

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def find_duplicates(
            self,
            paths: Iterable[str],
            config: ComparisonConfig,
            scan_params: ScanParams
    ) -> List[DuplicateGroup]:
        """Execute the scan and clustering workflow."""
        entries = EntryScannerImpl(scan_params).scan(paths)
        grouper = EntryGrouperImpl(ComparatorImpl(config), physical=scan_params.physical)
        groups = grouper.cluster(
            entries,
            progress_callback=self.progress_callback if self.verbose else None
        )
        if self.verbose:
            sys.stderr.write("\n")
        return groups

    def output_results(self, groups: List[DuplicateGroup], args: argparse.Namespace) -> None:
        """Write clusters in the requested format."""
        terminator = "\0" if args.null else "\n"
        out = self.stdout

        for index, group in enumerate(groups, 1):
            if args.excess:
                paths = group.get_paths()[1:]
            else:
                paths = group.get_paths()
                if not args.null:
                    header = ConvertUtils.format_header(
                        args.header_format, group.duplicate_count, index, group.size, group.digest)
                    out.write(header + "\n")

            for path in paths:
                out.write(path + terminator)

            if args.null:
                out.write("\0")
        out.flush()

    def print_summary(self, groups: List[DuplicateGroup]) -> None:
        total_files = sum(g.duplicate_count for g in groups)
        wasted = sum(g.size * (g.duplicate_count - 1) for g in groups)
        elapsed = time.time() - self.start_time
        print(
            f"{total_files} files in {len(groups)} clusters, "
            f"{ConvertUtils.bytes_to_human(wasted)} in excess copies "
            f"({elapsed:.2f}s)",
            file=sys.stderr
        )

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> int:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.validate_args(args)

        if self.verbose:
            logging.getLogger("twinfinder").setLevel(logging.DEBUG)

        config, scan_params = self.create_params(args)
        groups = self.find_duplicates(self.read_paths(args), config, scan_params)
        self.output_results(groups, args)

        if self.verbose:
            self.print_summary(groups)
        return 0


def main(argv=None) -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        sys.exit(app.run(argv))
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
