"""List the largest files below a directory."""

from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import List, Optional

from .api import DEFAULT_TOP_N, largest_files
from .errors import DiskTopError
from .report import render

__version__ = "0.3.0"

LOGGING_CONSOLE_LEVEL = logging.WARNING
LOGGING_FILE_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(message)s"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def non_negative(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return n


def positive(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return n


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(prog="disktop", description=__doc__)
    parser.add_argument("--version", action="version",
                        version="%(prog)s " + __version__)

    parser.add_argument("-d", "--dir", required=True, metavar="DIR",
                        help="directory to scan")

    msg = f"number of files to list (default {DEFAULT_TOP_N})"
    parser.add_argument("-n", "--num", type=non_negative, default=DEFAULT_TOP_N, help=msg)

    msg = "worker threads for directory listing; 1 scans sequentially"
    parser.add_argument("-w", "--workers", type=positive, help=msg)

    parser.add_argument("--no-follow-symlinks", dest="follow_symlinks",
                        action="store_false", help="skip symbolic links")
    parser.add_argument("--bytes", action="store_true",
                        help="print exact sizes in bytes")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true",
                           help="log debug messages")
    verbosity.add_argument("-q", "--quiet", action="store_true",
                           help="log errors only")

    parser.add_argument("--log-file", metavar="FILE", help="also write the log to FILE")

    return parser.parse_args(argv)


def setup_logging(console_level=LOGGING_CONSOLE_LEVEL,
                  log_file=None,
                  file_level=LOGGING_FILE_LEVEL):
    """Set up logging."""
    # Open the file first so a bad path leaves the current handlers alone
    fh = None
    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8", errors="backslashreplace")
        fh.setLevel(file_level)

    logger = logging.getLogger()
    levels = [console_level] + ([file_level] if log_file else [])
    logger.setLevel(min(levels))

    # Remove any existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    # Log to the terminal on stderr so the report stays clean on stdout
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(console_level)
    logger.addHandler(sh)

    if fh is not None:
        logger.addHandler(fh)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in logger.handlers:
        handler.setFormatter(formatter)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if args.verbose:
        console_level = logging.DEBUG
    elif args.quiet:
        console_level = logging.ERROR
    else:
        console_level = LOGGING_CONSOLE_LEVEL
    try:
        setup_logging(console_level, args.log_file,
                      file_level=min(console_level, LOGGING_FILE_LEVEL))
    except OSError as e:
        setup_logging(console_level)
        logging.error("Cannot open log file: %s", e)
        return EXIT_FAILURE

    if not os.path.isdir(args.dir):
        logging.error("The path provided is not a directory: %s", args.dir)
        return EXIT_FAILURE

    try:
        result, top = largest_files(args.dir, args.num,
                                    workers=args.workers,
                                    follow_symlinks=args.follow_symlinks)
    except KeyboardInterrupt:
        logging.error("Interrupted")
        return EXIT_INTERRUPTED
    except DiskTopError as e:
        logging.error("Application error: %s", e)
        return EXIT_FAILURE

    for line in render(result, top, exact=args.bytes):
        print(line)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
