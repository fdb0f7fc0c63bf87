"""
Logging Utilities

This module sets up logging for the project. Every module obtains its logger
through setup_logger(__name__) so console and file output share one format.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Union


def setup_logger(name: str,
                 level: int = logging.INFO,
                 log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__)
        level: Logging level (default: logging.INFO)
        log_file: Optional log file path. If provided, logs will be written to this file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers
    if logger.handlers:
        return logger

    logger.setLevel(level)

    console_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    # Pool workers log too, so the file format carries the process
    file_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(processName)s[%(process)d] | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def _package_loggers() -> List[logging.Logger]:
    prefix = __name__.split(".")[0]
    return [
        logger
        for name, logger in list(logging.root.manager.loggerDict.items())
        if isinstance(logger, logging.Logger)
        and (name == prefix or name.startswith(prefix + "."))
    ]


def configure_package_logging(level: Union[int, str] = logging.INFO,
                              log_file: Optional[str] = None,
                              stream: Optional[TextIO] = None) -> None:
    """
    Reconfigure every logger already created under the package.

    Module loggers are set up at import time with the defaults of
    setup_logger; the command-line scripts call this after reading the
    configuration.

    Args:
        level: Logging level for loggers and their handlers
        log_file: Optional log file; a file handler is attached to each
            package logger that does not write to it yet
        stream: Optional stream for the console handlers (e.g. sys.stderr
            when stdout carries program output)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    file_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(processName)s[%(process)d] | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    log_path = Path(log_file).resolve() if log_file else None
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)

    for logger in _package_loggers():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
            if stream is not None and type(handler) is logging.StreamHandler:
                handler.setStream(stream)

        if log_path is None:
            continue
        already = any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_path
            for h in logger.handlers
        )
        if not already:
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)
