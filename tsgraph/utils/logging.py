"""
Logging utilities for tsgraph.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. Graph edits and cascades log at DEBUG,
rejected model fits at WARNING. Applications (and the CLI) call
setup_logging once on the 'tsgraph' logger.

Example:
    >>> from tsgraph.utils import setup_logging
    >>>
    >>> logger = setup_logging('tsgraph', level=logging.DEBUG)
    >>> logger.info('Graph built')
"""

import os
import sys
import logging
from typing import Optional
from datetime import datetime


LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name with ANSI codes."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        # Work on a copy; a file handler on the same logger gets the raw record
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(colored.levelname)
        if color:
            colored.levelname = f"{color}{colored.levelname}{self.RESET}"
        return super().format(colored)


def log_file_path(log_dir: str, name: str) -> str:
    """Timestamped ``<name>_YYYYmmdd_HHMMSS.log`` path inside log_dir."""
    stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return os.path.join(log_dir, f'{name}_{stamp}.log')


def setup_logging(
    name: str = 'tsgraph',
    log_dir: Optional[str] = None,
    level: int = logging.INFO,
    console: bool = True,
    file: bool = True,
    colored: bool = True
) -> logging.Logger:
    """
    Attach console and/or file handlers to a logger, replacing old ones.

    Calling it again (e.g. once per CLI invocation) never stacks handlers.

    Args:
        name: Logger name; 'tsgraph' covers every library module
        log_dir: Directory for the log file, created if missing
        level: Level for the logger and its handlers
        console: Log to stderr, keeping stdout for command output
        file: Log to a file (ignored unless log_dir is given)
        colored: Color level names on the console

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = []

    if console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        formatter_cls = ColoredFormatter if colored else logging.Formatter
        handler.setFormatter(formatter_cls(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    if file and log_dir:
        os.makedirs(log_dir, exist_ok=True)
        path = log_file_path(log_dir, name)

        handler = logging.FileHandler(path)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

        logger.info("Logging to file: %s", path)

    return logger
