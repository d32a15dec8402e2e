"""Argument parser utilities for the watchdrain CLI."""

from .main_parser import add_logging_arguments, create_main_parser

__all__ = [
    "add_logging_arguments",
    "create_main_parser",
]
