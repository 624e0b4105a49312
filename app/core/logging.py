"""Process-wide logging setup."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"


def configure_logging(settings: "Settings") -> None:
    """Configure the root logger once at LOG_LEVEL; later calls are no-ops."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
