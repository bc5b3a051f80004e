from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
import logging
import sys

from .config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _rotating_handler(path: Path, level: int) -> logging.Handler:
    # Rotate hourly, keep two weeks of files
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(path, when="H", backupCount=14 * 24, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging():
    """Configure root logging: console always, rotating files when LOG_DIR is set."""
    handlers = [logging.StreamHandler(sys.stdout)]

    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        handlers.append(_rotating_handler(log_dir / "successes" / "docbook-success.log", logging.INFO))
        handlers.append(_rotating_handler(log_dir / "errors" / "docbook-error.log", logging.ERROR))

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
