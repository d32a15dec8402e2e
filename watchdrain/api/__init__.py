"""Command-line surface for watchdrain."""
