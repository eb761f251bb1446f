import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from src.match_data.config import (
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_FILE_NAME,
    LOG_FORMAT,
    LOG_MAX_BYTES,
)


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> Path:
    """Attach a rotating file handler and a console handler to the root logger.

    The file always records DEBUG (solver search steps, per-team evaluator
    lines); the console follows *log_level*. Calling it again once a rotating
    file handler is attached leaves the existing setup alone.

    Returns:
        Path of the log file.
    """
    log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    log_file = log_dir / LOG_FILE_NAME

    root_logger = logging.getLogger()
    if any(
        isinstance(h, logging.handlers.RotatingFileHandler) for h in root_logger.handlers
    ):
        return log_file

    log_dir.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info(
        "Logging to %s (console level=%s)", log_file, logging.getLevelName(level)
    )
    return log_file
