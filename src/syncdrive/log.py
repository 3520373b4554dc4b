"""Logging setup for applications embedding syncdrive."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

CONSOLE_FORMAT = "{time:HH:mm:ss} | {level} | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    rotation: str = "10 MB",
    retention: int = 5,
) -> None:
    """
    Configure loguru sinks. Library modules only emit; they never call this.

    Args:
        level: Console log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional rotating log file; it always captures DEBUG.
        console: Whether to log to stderr.
        rotation: Size at which the log file rotates.
        retention: Number of rotated files to keep.
    """
    logger.remove()

    if console:
        logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level="DEBUG",
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )

    logger.debug(f"Logging initialized (level={level}, file={log_file})")
