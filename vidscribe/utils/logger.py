#!/usr/bin/env python3
"""UTF-8-safe logging setup for VidScribe."""

import io
import logging
import sys
from pathlib import Path
from typing import Optional


class UTF8StreamHandler(logging.StreamHandler):
    """Stream handler that forces UTF-8 so transcript text never breaks the console."""
    def __init__(self, stream=None):
        encoding = (getattr(sys.stderr, 'encoding', '') or '').lower()
        # Only wrap when needed: a dropped wrapper closes the buffer it wraps
        if stream is None and encoding not in ('utf-8', 'utf8') and hasattr(sys.stderr, 'buffer'):
            stream = io.TextIOWrapper(
                sys.stderr.buffer,
                encoding='utf-8',
                errors='replace',
                line_buffering=True
            )
        super().__init__(stream)


def setup_logger(name: str = "vidscribe",
                 log_level: str = "INFO",
                 log_file: Optional[str] = None,
                 stream=None) -> logging.Logger:
    """Setup a UTF-8-safe logger with console and optional file output.

    Calling this again reconfigures the same named logger in place, so module
    level ``logger`` references picked up at import time keep working.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.handlers = []  # Clear existing handlers
    logger.propagate = False

    # Console handler
    console_handler = UTF8StreamHandler(stream)
    console_format = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler (optional)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8', errors='replace')
        file_format = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(filename)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


# Global logger instance shared by every module
logger = setup_logger()
