"""loguru sink setup for the watchdrain CLI."""

import sys

from loguru import logger

from watchdrain.core.config.logging_config import LoggingConfig


def configure_logging(config: LoggingConfig) -> list[int]:
    """Replace loguru's default sink with the configured console and file sinks.

    Args:
        config: Logging configuration

    Returns:
        Handler ids of the added sinks
    """
    logger.remove()

    handler_ids = [
        logger.add(
            sys.stderr,
            level=config.console_level,
            format=config.console_format,
            colorize=False,
        )
    ]

    if config.is_enabled():
        handler_ids.append(
            logger.add(
                config.file.path,
                level=config.file.level,
                format=config.file.format,
                rotation=config.file.rotation,
                retention=config.file.retention,
            )
        )

    return handler_ids
