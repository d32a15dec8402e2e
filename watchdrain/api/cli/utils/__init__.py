"""CLI utilities."""

from .logging_setup import configure_logging
from .rich_output import RichOutputFormatter

__all__ = [
    "RichOutputFormatter",
    "configure_logging",
]
