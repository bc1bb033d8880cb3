"""Logging configuration for skillsync entry points."""

import logging
import sys

from .config import Config


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class StructuredFormatter(logging.Formatter):
    """Prefixes messages with the `operation` extra when one is attached."""

    def format(self, record):
        if hasattr(record, 'operation'):
            record = logging.makeLogRecord(record.__dict__)
            record.msg = f"[{record.operation}] {record.msg}"
        return super().format(record)


def setup_logging(config: Config) -> None:
    """
    Configure the skillsync logger hierarchy.

    Everything goes to stderr; stdout belongs to the hook payload.
    """
    level = getattr(logging, config.log_level)

    logger = logging.getLogger('skillsync')
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
