"""
Logging configuration for the Docucast command line.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
STDLIB_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(verbose: bool = False, log_file: Optional[Union[str, Path]] = None) -> Optional[int]:
    """
    Configure loguru sinks and the stdlib logging used by the RAG core.

    Args:
        verbose: Log at DEBUG instead of INFO (WARNING for stdlib loggers)
        log_file: Optional path of a file sink receiving DEBUG and above

    Returns:
        Handler id of the file sink, or None when no file is configured
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=STDLIB_FORMAT,
        force=True,
    )

    if log_file is None:
        return None

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler_id = logger.add(
        log_path,
        format=FILE_FORMAT,
        level="DEBUG",
        enqueue=True,
    )
    logger.info(f"Logging to {log_path}")
    return handler_id
