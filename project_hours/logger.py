"""
Logging configuration.

Sets up logging to both console and a file under the configured log
directory, so `streamlit run` output and script runs leave the same trail.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from project_hours.config import config


def setup_logging(log_level: Union[int, str, None] = None,
                  log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure logging for the application.

    Sets up dual output:
    - Console handler: for streamlit run / script output
    - File handler: persistent log in the log directory

    Args:
        log_level: Logging level name or number (default: config.log_level)
        log_dir: Directory for the log file (default: config.log_dir)

    Returns:
        logging.Logger: Configured root logger
    """
    if log_level is None:
        log_level = config.log_level
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    log_dir = Path(log_dir) if log_dir is not None else config.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "project_hours.log"

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates on Streamlit reruns
    logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter('%(levelname)s - %(message)s')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # mode='w' starts a fresh file on each restart
    file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    file_handler.setLevel(log_level)
    file_handler.setFormatter(detailed_formatter)
    logger.addHandler(file_handler)

    logger.info(f"Logging initialized. Log file: {log_file}")
    logger.info(f"Log level: {logging.getLevelName(log_level)}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module (typically __name__)."""
    return logging.getLogger(name)
