"""CLI entry point and helpers."""
