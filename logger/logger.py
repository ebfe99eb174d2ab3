import logging
import os
import sys

# One stdout handler for the whole service; LOG_LEVEL is read directly since
# config.py logs through this module.
log_format = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format=log_format,
    handlers=[logging.StreamHandler(sys.stdout)]
)

logger = logging.getLogger("marketzone")


def get_logger(component: str) -> logging.Logger:
    """Child logger, e.g. ``marketzone.realtime``."""
    return logger.getChild(component)


__all__ = ["logger", "get_logger"]
