"""watchdrain command-line entry point.

    watchdrain [options] <dir>

Exit status is 0 once the directory drains and 1 for every other outcome.
"""

import sys
from argparse import Namespace
from collections.abc import Sequence

from loguru import logger
from pydantic import ValidationError

from watchdrain.api.cli.parsers import create_main_parser
from watchdrain.api.cli.utils.logging_setup import configure_logging
from watchdrain.api.cli.utils.rich_output import RichOutputFormatter
from watchdrain.core.config.logging_config import LoggingConfig
from watchdrain.core.config.watch_config import WatchConfig
from watchdrain.core.exceptions.watch import (
    DeadlineExceededError,
    WatchDrainError,
)
from watchdrain.services.directory_state import DirectoryState
from watchdrain.services.drain_watcher import DrainWatcher


def run_watch(directory: str, config: WatchConfig, formatter: RichOutputFormatter) -> int:
    """Watch one directory and report the outcome.

    Args:
        directory: Directory as given on the command line
        config: Watch configuration
        formatter: Output formatter for displaying results

    Returns:
        Process exit status
    """
    try:
        state = DirectoryState.from_path(directory)
        formatter.verbose_info(
            f"Watching {directory} ({state.file_count} files, "
            f"timer {config.describe_deadline() if config.has_deadline else 'off'}, "
            f"threshold {config.churn_threshold or 'off'})"
        )
        DrainWatcher(state, config).watch()
    except DeadlineExceededError as e:
        formatter.failure(directory, f"{e} after {config.describe_deadline()}")
        return 1
    except WatchDrainError as e:
        formatter.failure(directory, str(e))
        return 1
    except Exception as e:
        formatter.failure(directory, str(e))
        logger.exception("Full error details:")
        return 1

    formatter.drained(directory)
    return 0


def _build_configs(args: Namespace) -> tuple[WatchConfig, LoggingConfig]:
    watch_config = WatchConfig.from_sources(args)
    logging_overrides = LoggingConfig.extract_cli_overrides(args) or {}
    # Verbose mode surfaces per-event INFO lines on the console, whichever
    # source enabled it
    if watch_config.verbose:
        logging_overrides["console_level"] = "INFO"
    logging_config = LoggingConfig(**logging_overrides)
    return watch_config, logging_config


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments, run the watch and exit with its status."""
    parser = create_main_parser()
    args = parser.parse_args(argv)

    if len(args.directories) != 1:
        parser.print_help(sys.stderr)
        sys.exit(1)

    directory = args.directories[0]

    try:
        watch_config, logging_config = _build_configs(args)
    except ValidationError as e:
        print(f"{directory}: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(logging_config)
    formatter = RichOutputFormatter(verbose=watch_config.verbose)

    sys.exit(run_watch(directory, watch_config, formatter))


if __name__ == "__main__":
    main()
