# amm_arbitrage/utils/logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s | %(levelname)8s | %(name)20s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_file_handler: Optional[logging.Handler] = None


class ColoredFormatter(colorlog.ColoredFormatter):
    """Console formatter, one colour per level"""

    def __init__(self):
        super().__init__(
            LOG_FORMAT,
            datefmt=DATE_FORMAT,
            reset=True,
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            }
        )


def get_logger(name: str, level: str = "INFO") -> logging.Logger:
    """
    Get a configured logger with colored output

    Args:
        name: Logger name
        level: Logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Already configured
    if logger.handlers:
        return logger

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(ColoredFormatter())
    logger.addHandler(console_handler)

    if _file_handler is not None:
        logger.addHandler(_file_handler)

    # Prevent duplicate lines through the root logger
    logger.propagate = False

    return logger


def setup_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Alias for get_logger"""
    return get_logger(name, level)


def set_log_level(level: str) -> None:
    """Apply a level to every logger created through get_logger."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    for logger in _package_loggers():
        logger.setLevel(log_level)
        for handler in logger.handlers:
            handler.setLevel(log_level)


def enable_file_logging(path: Union[str, Path], max_bytes: int = 5_000_000,
                        backup_count: int = 3) -> logging.Handler:
    """
    Mirror every package logger into a rotating plain-text file.

    Loggers created afterwards pick the handler up automatically.
    """
    global _file_handler

    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    if _file_handler is None:
        _file_handler = RotatingFileHandler(log_path, maxBytes=max_bytes,
                                            backupCount=backup_count, encoding="utf-8")
        _file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

        for logger in _package_loggers():
            if _file_handler not in logger.handlers:
                logger.addHandler(_file_handler)

    return _file_handler


def _package_loggers():
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and logger.handlers and not logger.propagate:
            yield logger

