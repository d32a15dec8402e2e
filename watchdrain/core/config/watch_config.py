"""Watch configuration for watchdrain.

This module provides the immutable settings shared read-only by every
thread of a single watch: the deadline, the churn threshold and verbosity.
"""

import argparse
import os
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from watchdrain.core.constants import DEFAULT_POLL_INTERVAL, DEFAULT_TIMER_SECONDS
from watchdrain.core.utils.duration import format_duration, parse_duration


class WatchConfig(BaseModel):
    """Configuration for one drain watch.

    Configuration can be provided via:
    - Environment variables (WATCHDRAIN_*)
    - CLI arguments
    - Default values

    A zero deadline disables the deadline timer and a zero threshold
    disables churn monitoring.
    """

    model_config = ConfigDict(frozen=True)

    deadline: float = Field(
        default=0.0,
        ge=0.0,
        description="Seconds to wait for the directory to drain (0 = no deadline)",
    )

    churn_threshold: int = Field(
        default=0,
        ge=0,
        description="Maximum tolerated excess of creates over removes (0 = disabled)",
    )

    verbose: bool = Field(default=False, description="Log every create and remove event")

    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        gt=0.0,
        description="Seconds between error and cancellation checks while idle",
    )

    @field_validator("deadline", mode="before")
    @classmethod
    def validate_deadline(cls, v: Any) -> Any:
        """Accept duration strings such as '50ms' or '5m'."""
        if isinstance(v, str):
            return parse_duration(v)
        if hasattr(v, "total_seconds"):
            return v.total_seconds()
        return v

    @property
    def has_deadline(self) -> bool:
        return self.deadline > 0

    @property
    def monitors_churn(self) -> bool:
        return self.churn_threshold > 0

    def describe_deadline(self) -> str:
        """Deadline rendered for user-facing messages (e.g. '5m0s')."""
        return format_duration(self.deadline)

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add watch-related CLI arguments."""
        parser.add_argument(
            "--timer",
            "-timer",
            "--deadline",
            "-deadline",
            dest="timer",
            type=parse_duration,
            default=None,
            help=(
                "Time to wait for the directory to drain, e.g. 50ms, 1m, 1h30m "
                f"(default: {format_duration(DEFAULT_TIMER_SECONDS)}, 0 disables)"
            ),
        )

        parser.add_argument(
            "--threshold",
            "-threshold",
            "--event-monitor",
            "-eventMonitor",
            dest="threshold",
            type=int,
            default=None,
            help=(
                "Stop watching when file create events exceed remove events by "
                "this threshold (threshold = creates - removes). Increase to "
                "allow more file creation activity. The lowest threshold is 1 "
                "(default: disabled)"
            ),
        )

        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Log file create and remove events",
        )

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        """Load watch config from environment variables.

        Malformed values are skipped with a warning so the next source applies.
        """
        config: dict[str, Any] = {}
        if timer := os.getenv("WATCHDRAIN_TIMER"):
            try:
                config["deadline"] = parse_duration(timer)
            except ValueError:
                logger.warning(f"Ignoring invalid WATCHDRAIN_TIMER value: {timer!r}")
        if threshold := os.getenv("WATCHDRAIN_THRESHOLD"):
            try:
                config["churn_threshold"] = int(threshold)
            except ValueError:
                logger.warning(f"Ignoring invalid WATCHDRAIN_THRESHOLD value: {threshold!r}")
        if verbose := os.getenv("WATCHDRAIN_VERBOSE"):
            config["verbose"] = verbose.lower() in ("true", "1", "yes")
        if poll_interval := os.getenv("WATCHDRAIN_POLL_INTERVAL"):
            try:
                config["poll_interval"] = float(poll_interval)
            except ValueError:
                logger.warning(f"Ignoring invalid WATCHDRAIN_POLL_INTERVAL value: {poll_interval!r}")
        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Extract watch config overrides from CLI arguments."""
        overrides: dict[str, Any] = {}
        if getattr(args, "timer", None) is not None:
            overrides["deadline"] = args.timer
        if getattr(args, "threshold", None) is not None:
            overrides["churn_threshold"] = args.threshold
        if getattr(args, "verbose", False):
            overrides["verbose"] = True
        return overrides

    @classmethod
    def from_sources(cls, args: Any = None) -> "WatchConfig":
        """Build a config with precedence defaults < environment < CLI.

        The CLI default deadline applies here; constructing ``WatchConfig()``
        directly means no deadline.
        """
        values: dict[str, Any] = {"deadline": DEFAULT_TIMER_SECONDS}
        values.update(cls.load_from_env())
        if args is not None:
            values.update(cls.extract_cli_overrides(args))
        return cls(**values)
