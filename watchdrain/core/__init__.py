"""Core types, configuration and exceptions."""
