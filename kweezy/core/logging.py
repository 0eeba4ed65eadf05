"""
Logging setup
"""
import logging
from typing import Optional

from kweezy.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once for the process.

    Args:
        level: log level name, defaults to settings.LOG_LEVEL
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    # SQL echo is controlled by the engine, keep sqlalchemy quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
