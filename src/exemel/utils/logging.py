"""Logging helpers."""

import logging

from ..config import get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once."""
    settings = get_settings()
    level = level or settings.log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
