"""
Logging configuration for combinedata.

All loggers live under the "combinedata" namespace, so hosts can tune
combination diagnostics (rejections at INFO, offsets and per-input
linking at DEBUG) with one standard logging call:

    logging.getLogger("combinedata").setLevel(logging.DEBUG)

or through combinedata.verbose(), which delegates to set_verbosity().

Usage:
    from combinedata._logging import dataset_label, get_logger

    logger = get_logger(__name__)
    logger.debug(f"Linked {dataset_label(ds)}")
"""

import logging
from typing import Optional

ROOT_LOGGER_NAME = "combinedata"

DEFAULT_FORMAT = "%(levelname)s [%(name)s] %(message)s"

DATASET_ID_DISPLAY_LENGTH = 8
"""Leading characters of a dataset ID shown in log messages."""


def get_logger(name: str) -> logging.Logger:
    """Get logger for combinedata module."""
    if not name.startswith(ROOT_LOGGER_NAME):
        name = ROOT_LOGGER_NAME if name == "__main__" else f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def dataset_label(dataset) -> str:
    """Short "'name' (id-prefix)" label for a dataset in log messages."""
    return f"'{dataset.name}' ({dataset.id[:DATASET_ID_DISPLAY_LENGTH]})"


def setup_basic_logging(
    level: int = logging.INFO, format: Optional[str] = None
) -> None:
    """
    Attach one console handler to the combinedata logger.

    Repeated calls only change the level (and format, if given).
    Propagation is disabled to avoid duplicate lines under a root handler.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
        logger.addHandler(handler)
    elif format is not None:
        for handler in logger.handlers:
            handler.setFormatter(logging.Formatter(format))

    for handler in logger.handlers:
        handler.setLevel(level)

    logger.propagate = False


def set_verbosity(level=True) -> None:
    """
    Apply a combinedata.verbose() level.

    Args:
        level: True or "info" (rejections and summaries), "debug"
            (offsets, per-input linking, hook teardown), False (silent)

    Raises:
        ValueError: For any other value
    """
    if level is False:
        logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.CRITICAL + 1)
    elif level is True or level == "info":
        setup_basic_logging(level=logging.INFO)
    elif level == "debug":
        setup_basic_logging(level=logging.DEBUG)
    else:
        raise ValueError(
            f"Invalid verbose level: {level}. " "Use True, 'info', 'debug', or False."
        )
