"""Rich-based output formatting for the watchdrain CLI.

Result lines are printed verbatim (no markup, highlighting or wrapping) so
scripts gating on watchdrain can match them exactly.
"""

import os
import sys

from rich.console import Console
from rich.markup import escape


# Constants for fallback message prefixes
class MessagePrefixes:
    """Constants for consistent message prefixes in fallback mode."""

    DEBUG = "[DEBUG]"


class RichOutputFormatter:
    """Terminal output for watch results and diagnostics."""

    def __init__(self, verbose: bool = False):
        """Initialize Rich output formatter.

        Args:
            verbose: Whether to enable verbose output
        """
        self.verbose = verbose
        self._terminal_compatible = self._check_terminal_compatibility()
        self.console = Console() if self._terminal_compatible else None
        self.error_console = Console(stderr=True) if self._terminal_compatible else None

    def _check_terminal_compatibility(self) -> bool:
        """Check if terminal supports Rich formatting."""
        if os.environ.get("WATCHDRAIN_NO_RICH"):
            return False

        try:
            if not sys.stdout.isatty():
                return False

            term = os.environ.get("TERM", "")
            if term in ["dumb", "unknown"]:
                return False

            return True
        except Exception:
            return False

    def _safe_print(self, message: str, *, stderr: bool = False, markup: bool = False) -> None:
        """Print with Rich or fall back to plain text."""
        console = self.error_console if stderr else self.console
        if console is not None:
            try:
                console.print(message, markup=markup, highlight=False, soft_wrap=True)
                return
            except Exception:
                # Rich failed, fall through to plain print
                pass

        print(message, file=sys.stderr if stderr else sys.stdout, flush=True)

    def drained(self, directory: str) -> None:
        """Print the success line: '<dir> drained:true'."""
        self._safe_print(f"{directory} drained:true")

    def failure(self, directory: str, reason: str) -> None:
        """Print a failure line to stderr: '<dir>: <reason>'."""
        self._safe_print(f"{directory}: {reason}", stderr=True)

    def verbose_info(self, message: str) -> None:
        """Print a verbose info message if verbose mode is enabled."""
        if not self.verbose:
            return
        if self.error_console is not None:
            self._safe_print(f"[cyan][DEBUG][/cyan] {escape(message)}", stderr=True, markup=True)
        else:
            self._safe_print(f"{MessagePrefixes.DEBUG} {message}", stderr=True)
