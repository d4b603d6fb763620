from __future__ import annotations

import logging
from typing import Optional

from .config import ObservabilityConfig, get_config

logger = logging.getLogger("laertes")


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Apply the configured level and format to the root logger."""
    config = config or get_config().observability
    level = logging.getLevelName(config.level.upper())
    known = isinstance(level, int)

    logging.basicConfig(level=level if known else logging.INFO, format=config.format)
    logging.getLogger().setLevel(level if known else logging.INFO)

    if not known:
        logger.warning(f"Unknown log level {config.level!r}, using INFO")
