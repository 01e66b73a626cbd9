"""Logging setup shared by the CLI and the API server."""

import logging

from priority_tracker.utils.config import Config

_configured = False


def configure_logging(config: Config) -> None:
    """Configure root logging once from the ``logging`` config section."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format=config.logging.format,
        handlers=[logging.StreamHandler()],
    )
    _configured = True
