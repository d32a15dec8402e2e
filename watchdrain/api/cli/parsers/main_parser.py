"""Argument parser for the watchdrain command."""

import argparse

from watchdrain.core.config.watch_config import WatchConfig


def add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    """Add logging arguments.

    Args:
        parser: Argument parser to add logging arguments to
    """
    parser.add_argument(
        "--log-file",
        type=str,
        help="Enable file logging to specified path",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set file logging level (default: INFO)",
    )


def create_main_parser(prog: str = "watchdrain") -> argparse.ArgumentParser:
    """Create the watchdrain argument parser.

    The directory is collected with ``nargs="*"`` so the caller can report
    a wrong number of directories with the usage text and exit status 1.
    """
    parser = argparse.ArgumentParser(
        prog=prog,
        usage=f"{prog} [options] <dir>",
        description=(
            "Watch a directory until it is empty of files, a deadline ends, "
            "or file creation outpaces removal by a threshold."
        ),
    )

    parser.add_argument(
        "directories",
        nargs="*",
        metavar="dir",
        help="Directory to watch",
    )

    WatchConfig.add_cli_arguments(parser)
    add_logging_arguments(parser)

    return parser
