"""Process-wide "barista" logger, configured once from LOG_LEVEL."""
import logging
from typing import Optional

from ..app.config import Config

ROOT_NAME = "barista"

logger = logging.getLogger(ROOT_NAME)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(Config.LOG_LEVEL)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """The shared logger, or a child of it (``barista.<name>``) sharing its handler."""
    return logger.getChild(name) if name else logger
