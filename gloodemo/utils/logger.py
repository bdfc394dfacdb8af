"""Logging configuration."""

import logging
from typing import Optional

ROOT_LOGGER_NAME = "gloodemo"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance."""
    logger = logging.getLogger(name or ROOT_LOGGER_NAME)

    # Only the package root gets a handler; module loggers propagate to it
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    return logger


def set_verbose(verbose: bool) -> None:
    """Switch the package logger between INFO and DEBUG."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.INFO)
